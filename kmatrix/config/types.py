from dataclasses import dataclass, field

DEFAULT_CONFIG_PATH = "./config.yaml"
DEFAULT_VNG_PATH = "vng"


@dataclass
class RunConfig:
    vng_path: str = DEFAULT_VNG_PATH
    cmd: str = ""
    parallel: int = 1
    out_path: str = ""
    report_only: bool = False
    kernel_versions: list[str] = field(default_factory=list)

    def command_argv(self) -> list[str]:
        return self.cmd.split()

    def __str__(self) -> str:
        return (
            f'RunConfig(vng_path="{self.vng_path}", cmd="{self.cmd}", '
            f"parallel={self.parallel}, out_path=\"{self.out_path}\", "
            f"report_only={self.report_only}, kernel_versions={self.kernel_versions})"
        )


class ConfigError(Exception):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class UnsupportedConfigFormatError(ConfigError):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)

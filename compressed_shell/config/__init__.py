from compressed_shell.config.settings import CompressedShellSettings, settings

__all__ = ["CompressedShellSettings", "settings"]

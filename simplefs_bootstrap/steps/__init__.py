from .step_10_install_packages import InstallPackagesStep
from .step_20_install_toolchain import InstallToolchainStep

__all__ = [
    "InstallPackagesStep",
    "InstallToolchainStep",
]

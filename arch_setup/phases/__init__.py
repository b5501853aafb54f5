from .phase_10_initialize import InitializePhase
from .phase_20_install_modules import InstallModulesPhase
from .phase_30_configure_dotfiles import ConfigureDotfilesPhase
from .phase_40_complete import CompletePhase

__all__ = [
    "InitializePhase",
    "InstallModulesPhase",
    "ConfigureDotfilesPhase",
    "CompletePhase",
]

from .step_10_connectivity import CheckNetworkStep
from .step_20_system import DnfTuningStep, FirmwareUpdateStep, SystemUpdateCheckStep
from .step_30_repositories import FlathubStep, RpmFusionStep
from .step_40_gpu import IntelMediaDriverStep, MesaFreeworldStep, NvidiaDriverStep, RocmStep
from .step_50_fonts import MicrosoftFontsStep, VariousFontsStep
from .step_60_utilities import CompressionToolsStep, DesktopToolsStep, MultimediaStep, NonfreeFirmwareStep
from .step_70_desktop import GnomeExtensionsStep
from .step_80_filesystem import BtrfsToolsStep

__all__ = [
    "CheckNetworkStep",
    "SystemUpdateCheckStep",
    "DnfTuningStep",
    "FirmwareUpdateStep",
    "RpmFusionStep",
    "FlathubStep",
    "NvidiaDriverStep",
    "MesaFreeworldStep",
    "RocmStep",
    "IntelMediaDriverStep",
    "MicrosoftFontsStep",
    "VariousFontsStep",
    "CompressionToolsStep",
    "DesktopToolsStep",
    "MultimediaStep",
    "NonfreeFirmwareStep",
    "GnomeExtensionsStep",
    "BtrfsToolsStep",
]

from .phases import PHASE_MARKERS, Phase, PhaseDescriptor, RawBlock
from .profile import ParserProfile, load_profile
from .records import (
    DeploymentSample,
    ElapsedTime,
    EmissionSample,
    PayloadOffSample,
    Pinpuller,
    RepellerReading,
    SampleRecord,
    SupplyReading,
    Temperatures,
    TetherSensors,
)

__all__ = [
    "PHASE_MARKERS",
    "Phase",
    "PhaseDescriptor",
    "RawBlock",
    "ParserProfile",
    "load_profile",
    "SampleRecord",
    "PayloadOffSample",
    "DeploymentSample",
    "EmissionSample",
    "ElapsedTime",
    "Temperatures",
    "Pinpuller",
    "SupplyReading",
    "RepellerReading",
    "TetherSensors",
]

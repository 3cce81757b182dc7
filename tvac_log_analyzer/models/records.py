from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, ClassVar, Dict, Optional

from tvac_log_analyzer.models.phases import Phase


@dataclass(frozen=True)
class ElapsedTime:
    """Seconds since the start of the test (total) and of the current phase."""
    total_time: int
    phase_time: int


@dataclass(frozen=True)
class Temperatures:
    """The eight monitored temperatures, in degrees Celsius, in log order."""
    lms_emitter: int
    lms_receiver: int
    msp: int
    heater: int
    hvdc: int
    tether_monitoring: int
    tether_connector: int
    msp_3v3_supply: int


@dataclass(frozen=True)
class Pinpuller:
    current: int  # mA
    accuracy: float  # %


@dataclass(frozen=True)
class SupplyReading:
    """
    Voltage/current pair of one emission supply.

    Units: voltage in mV; current in uA for the cathode-offset and tether-bias
    supplies, mA for the heater supply. Accuracies are percentages.
    """
    voltage: int
    current: int
    voltage_accuracy: float
    current_accuracy: float


@dataclass(frozen=True)
class RepellerReading:
    voltage: int  # mV
    voltage_accuracy: float  # %


@dataclass(frozen=True)
class TetherSensors:
    cathode_offset: SupplyReading
    tether_bias: SupplyReading
    heater: SupplyReading
    repeller: RepellerReading


@dataclass(frozen=True)
class SampleRecord:
    """
    Fields shared by every sample. Concrete records are the three phase
    variants below; ``phase`` is fixed per variant.
    """
    phase: ClassVar[Phase]

    time: ElapsedTime
    temperatures: Temperatures

    def to_row(self) -> Dict[str, Any]:
        """Flatten into the output-table layout; fields of other phases are None."""
        row: Dict[str, Any] = {"phase": self.phase.value}
        row.update(_prefixed("", self.time))
        row.update(_prefixed("temp_", self.temperatures))
        row.update(_prefixed("pinpuller_", None, Pinpuller))
        for name in ("cathode_offset", "tether_bias", "heater"):
            row.update(_prefixed(f"{name}_", None, SupplyReading))
        row.update(_prefixed("repeller_", None, RepellerReading))
        return row


@dataclass(frozen=True)
class PayloadOffSample(SampleRecord):
    phase: ClassVar[Phase] = Phase.PAYLOAD_OFF


@dataclass(frozen=True)
class DeploymentSample(SampleRecord):
    phase: ClassVar[Phase] = Phase.DEPLOYMENT

    pinpuller: Pinpuller

    def to_row(self) -> Dict[str, Any]:
        row = super().to_row()
        row.update(_prefixed("pinpuller_", self.pinpuller))
        return row


@dataclass(frozen=True)
class EmissionSample(SampleRecord):
    phase: ClassVar[Phase] = Phase.EMISSION

    tether: TetherSensors

    def to_row(self) -> Dict[str, Any]:
        row = super().to_row()
        row.update(_prefixed("cathode_offset_", self.tether.cathode_offset))
        row.update(_prefixed("tether_bias_", self.tether.tether_bias))
        row.update(_prefixed("heater_", self.tether.heater))
        row.update(_prefixed("repeller_", self.tether.repeller))
        return row


def _prefixed(prefix: str, obj: Any, cls: Optional[type] = None) -> Dict[str, Any]:
    cls = cls if cls is not None else type(obj)
    return {f"{prefix}{f.name}": (getattr(obj, f.name) if obj is not None else None) for f in fields(cls)}

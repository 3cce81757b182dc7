"""Per-phase field tables and the generic block interpreter.

Each phase maps a fixed-length block to a record through one constant table
of :class:`FieldSpec` rows (field name -> line offset, word index, unit,
numeric kind). Word indices count whitespace-separated words; for lines that
carry a unit the 7-character status prefix is removed before counting.

Typical lines::

    Total time: 120                                   (word 2, no unit)
    MSP 3V3 supply: 29                                (word 3, no unit)
    [ OK ] Measured output current: 150mA             (word 3, "mA")
    [FAIL] Voltage accuracy: 1.5%                     (word 2, "%")
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from tvac_log_analyzer.errors import TvacLogError
from tvac_log_analyzer.ingest.fields import Number, extract
from tvac_log_analyzer.models.phases import Phase, RawBlock
from tvac_log_analyzer.models.records import (
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


@dataclass(frozen=True)
class FieldSpec:
    name: str
    line: int
    word: int
    unit: Optional[str] = None
    kind: str = "i32"

    def shifted(self, offset: int) -> "FieldSpec":
        return FieldSpec(self.name, self.line + offset, self.word, self.unit, self.kind)


TIME_FIELDS: Tuple[FieldSpec, ...] = (
    FieldSpec("total_time", 0, 2, kind="u32"),
    FieldSpec("phase_time", 1, 2, kind="u32"),
)

# Relative to the first temperature line. The word index depends on how many
# words the label has ("MSP:" vs "LMS emitter:" vs "MSP 3V3 supply:").
TEMPERATURE_FIELDS: Tuple[FieldSpec, ...] = (
    FieldSpec("temp_lms_emitter", 0, 2, kind="i16"),
    FieldSpec("temp_lms_receiver", 1, 2, kind="i16"),
    FieldSpec("temp_msp", 2, 1, kind="i16"),
    FieldSpec("temp_heater", 3, 2, kind="i16"),
    FieldSpec("temp_hvdc", 4, 2, kind="i16"),
    FieldSpec("temp_tether_monitoring", 5, 2, kind="i16"),
    FieldSpec("temp_tether_connector", 6, 2, kind="i16"),
    FieldSpec("temp_msp_3v3_supply", 7, 3, kind="i16"),
)


def _temperatures_at(offset: int) -> Tuple[FieldSpec, ...]:
    return tuple(f.shifted(offset) for f in TEMPERATURE_FIELDS)


PAYLOAD_OFF_FIELDS: Tuple[FieldSpec, ...] = TIME_FIELDS + _temperatures_at(2)

# Temperatures are extracted before the phase-specific readings, so a block
# with several bad fields reports the temperature failure first.
DEPLOYMENT_FIELDS: Tuple[FieldSpec, ...] = TIME_FIELDS + _temperatures_at(4) + (
    FieldSpec("pinpuller_current", 2, 3, "mA", "u16"),
    FieldSpec("pinpuller_accuracy", 3, 3, "%", "f32"),
)

EMISSION_FIELDS: Tuple[FieldSpec, ...] = TIME_FIELDS + _temperatures_at(25) + (
    FieldSpec("cathode_offset_voltage", 2, 3, "mV"),
    FieldSpec("cathode_offset_current", 3, 3, "uA"),
    FieldSpec("cathode_offset_voltage_accuracy", 7, 3, "%", "f32"),
    FieldSpec("cathode_offset_current_accuracy", 8, 3, "%", "f32"),
    FieldSpec("tether_bias_voltage", 9, 3, "mV"),
    FieldSpec("tether_bias_current", 10, 3, "uA"),
    FieldSpec("tether_bias_voltage_accuracy", 14, 3, "%", "f32"),
    FieldSpec("tether_bias_current_accuracy", 15, 3, "%", "f32"),
    FieldSpec("heater_voltage", 16, 3, "mV"),
    FieldSpec("heater_current", 17, 3, "mA"),
    FieldSpec("heater_voltage_accuracy", 20, 2, "%", "f32"),
    FieldSpec("heater_current_accuracy", 21, 2, "%", "f32"),
    FieldSpec("repeller_voltage", 22, 3, "mV"),
    FieldSpec("repeller_voltage_accuracy", 24, 2, "%", "f32"),
)

FIELD_TABLES: Dict[Phase, Tuple[FieldSpec, ...]] = {
    Phase.PAYLOAD_OFF: PAYLOAD_OFF_FIELDS,
    Phase.DEPLOYMENT: DEPLOYMENT_FIELDS,
    Phase.EMISSION: EMISSION_FIELDS,
}


def extract_fields(block: RawBlock, table: Sequence[FieldSpec]) -> Dict[str, Number]:
    """
    Extract every field of ``table`` from ``block``, in table order.

    The first failing field aborts the extraction; its error is enriched with
    the phase, the field name and the line offset inside the block.
    """
    values: Dict[str, Number] = {}
    for fs in table:
        line = block[fs.line]
        try:
            values[fs.name] = extract(line, fs.word, fs.unit, fs.kind)
        except TvacLogError as e:
            raise e.with_context(
                phase=block.phase.value,
                field=fs.name,
                line_offset=fs.line,
                line_no=block.first_line_no + fs.line,
            )
    return values


def _time(v: Dict[str, Number]) -> ElapsedTime:
    return ElapsedTime(total_time=int(v["total_time"]), phase_time=int(v["phase_time"]))


def _temperatures(v: Dict[str, Number]) -> Temperatures:
    return Temperatures(**{f.name[len("temp_"):]: int(v[f.name]) for f in TEMPERATURE_FIELDS})


def _supply(v: Dict[str, Number], prefix: str) -> SupplyReading:
    return SupplyReading(
        voltage=int(v[f"{prefix}_voltage"]),
        current=int(v[f"{prefix}_current"]),
        voltage_accuracy=float(v[f"{prefix}_voltage_accuracy"]),
        current_accuracy=float(v[f"{prefix}_current_accuracy"]),
    )


def _build_payload_off(v: Dict[str, Number]) -> PayloadOffSample:
    return PayloadOffSample(time=_time(v), temperatures=_temperatures(v))


def _build_deployment(v: Dict[str, Number]) -> DeploymentSample:
    return DeploymentSample(
        time=_time(v),
        temperatures=_temperatures(v),
        pinpuller=Pinpuller(current=int(v["pinpuller_current"]), accuracy=float(v["pinpuller_accuracy"])),
    )


def _build_emission(v: Dict[str, Number]) -> EmissionSample:
    return EmissionSample(
        time=_time(v),
        temperatures=_temperatures(v),
        tether=TetherSensors(
            cathode_offset=_supply(v, "cathode_offset"),
            tether_bias=_supply(v, "tether_bias"),
            heater=_supply(v, "heater"),
            repeller=RepellerReading(
                voltage=int(v["repeller_voltage"]),
                voltage_accuracy=float(v["repeller_voltage_accuracy"]),
            ),
        ),
    )


_BUILDERS: Dict[Phase, Callable[[Dict[str, Number]], SampleRecord]] = {
    Phase.PAYLOAD_OFF: _build_payload_off,
    Phase.DEPLOYMENT: _build_deployment,
    Phase.EMISSION: _build_emission,
}


def interpret_block(block: RawBlock) -> SampleRecord:
    """Map a framed block to the record variant of its phase (all-or-nothing)."""
    values = extract_fields(block, FIELD_TABLES[block.phase])
    return _BUILDERS[block.phase](values)


def interpret_payload_off(lines: Sequence[str], **kw: Any) -> PayloadOffSample:
    return interpret_block(RawBlock(Phase.PAYLOAD_OFF, tuple(lines), **kw))  # type: ignore[return-value]


def interpret_deployment(lines: Sequence[str], **kw: Any) -> DeploymentSample:
    return interpret_block(RawBlock(Phase.DEPLOYMENT, tuple(lines), **kw))  # type: ignore[return-value]


def interpret_emission(lines: Sequence[str], **kw: Any) -> EmissionSample:
    return interpret_block(RawBlock(Phase.EMISSION, tuple(lines), **kw))  # type: ignore[return-value]


def interpret_lines(phase: Phase, lines: Sequence[str]) -> SampleRecord:
    """Generic entry point; a wrong line count raises BlockLengthMismatch."""
    return interpret_block(RawBlock(phase, tuple(lines)))

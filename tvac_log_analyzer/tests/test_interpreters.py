from __future__ import annotations

import pytest

from tvac_log_analyzer.errors import BlockLengthMismatch, ErrorKind, TvacLogError
from tvac_log_analyzer.ingest.interpreters import (
    DEPLOYMENT_FIELDS,
    EMISSION_FIELDS,
    FIELD_TABLES,
    PAYLOAD_OFF_FIELDS,
    interpret_deployment,
    interpret_emission,
    interpret_lines,
    interpret_payload_off,
)
from tvac_log_analyzer.models.phases import Phase
from tvac_log_analyzer.models.records import (
    DeploymentSample,
    ElapsedTime,
    EmissionSample,
    PayloadOffSample,
    Temperatures,
)


def test_field_tables_fit_their_blocks() -> None:
    for phase, table in FIELD_TABLES.items():
        names = [f.name for f in table]
        assert len(names) == len(set(names)), phase
        assert all(0 <= f.line < phase.block_length for f in table), phase
    assert len(PAYLOAD_OFF_FIELDS) == 10
    assert len(DEPLOYMENT_FIELDS) == 12
    assert len(EMISSION_FIELDS) == 24


def test_payload_off_example(logs) -> None:
    rec = interpret_payload_off(logs.payload_off(total=120, phase=5, temps=range(22, 30)))
    assert isinstance(rec, PayloadOffSample)
    assert rec.phase is Phase.PAYLOAD_OFF
    assert rec.time.total_time == 120
    assert rec.time.phase_time == 5
    assert rec.temperatures == Temperatures(22, 23, 24, 25, 26, 27, 28, 29)


def test_deployment_block(logs) -> None:
    rec = interpret_deployment(logs.deployment(total=301, phase=11, current="150mA", accuracy="2.5%"))
    assert isinstance(rec, DeploymentSample)
    assert rec.phase is Phase.DEPLOYMENT
    assert rec.time.total_time == 301
    assert rec.time.phase_time == 11
    assert rec.pinpuller.current == 150
    assert rec.pinpuller.accuracy == 2.5
    assert rec.temperatures.lms_emitter == 30
    assert rec.temperatures.msp_3v3_supply == 37


def test_deployment_wrong_unit_is_unit_mismatch(logs) -> None:
    with pytest.raises(TvacLogError) as ei:
        interpret_deployment(logs.deployment(current="150A"))
    err = ei.value
    assert err.kind is ErrorKind.UNIT_MISMATCH
    assert err.context["field"] == "pinpuller_current"
    assert err.context["line_offset"] == 2
    assert err.context["phase"] == "Deployment"


def test_emission_block(logs) -> None:
    rec = interpret_emission(
        logs.emission(
            total=900,
            phase=42,
            cathode=(259372, 1250, "0.5", "1.2"),
            bias=(-120000, -800, "0.7", "1.1"),
            heater=(5100, 1900, "0.8", "0.9"),
            repeller=(-1500, "0.3"),
            temps=(40, 41, 42, 43, 44, 45, -46, 47),
        )
    )
    assert isinstance(rec, EmissionSample)
    assert rec.phase is Phase.EMISSION
    assert (rec.time.total_time, rec.time.phase_time) == (900, 42)
    t = rec.tether
    assert (t.cathode_offset.voltage, t.cathode_offset.current) == (259372, 1250)
    assert (t.cathode_offset.voltage_accuracy, t.cathode_offset.current_accuracy) == (0.5, 1.2)
    assert (t.tether_bias.voltage, t.tether_bias.current) == (-120000, -800)
    assert (t.tether_bias.voltage_accuracy, t.tether_bias.current_accuracy) == (0.7, 1.1)
    assert (t.heater.voltage, t.heater.current) == (5100, 1900)
    assert (t.heater.voltage_accuracy, t.heater.current_accuracy) == (0.8, 0.9)
    assert (t.repeller.voltage, t.repeller.voltage_accuracy) == (-1500, 0.3)
    assert rec.temperatures == Temperatures(40, 41, 42, 43, 44, 45, -46, 47)


def test_fail_status_does_not_fail_the_block(logs) -> None:
    lines = logs.emission()
    lines[2] = lines[2].replace("[ OK ]", "[FAIL]")
    rec = interpret_emission(lines)
    assert rec.tether.cathode_offset.voltage == 259372


@pytest.mark.parametrize(
    "offset, replacement, kind",
    [
        (3, "[ OK ] Measured output current: 1250mA", ErrorKind.UNIT_MISMATCH),
        (17, "[ OK ] Measured output current: 1900uA", ErrorKind.UNIT_MISMATCH),
        (22, "[ OK ] Measured repeller voltage:", ErrorKind.FIELD_MISSING),
        (24, "[ OK ] Voltage accuracy: high%", ErrorKind.NUMERIC_PARSE_FAILURE),
        (31, "Tether connector: ??", ErrorKind.NUMERIC_PARSE_FAILURE),
    ],
)
def test_single_bad_line_fails_whole_emission_block(logs, offset, replacement, kind) -> None:
    lines = logs.emission()
    lines[offset] = replacement
    with pytest.raises(TvacLogError) as ei:
        interpret_emission(lines)
    assert ei.value.kind is kind
    assert ei.value.context["line_offset"] == offset


def test_first_failure_in_table_order_is_reported(logs) -> None:
    lines = logs.payload_off()
    lines[0] = "Total time: soon"
    lines[9] = "MSP 3V3 supply: warm"
    with pytest.raises(TvacLogError) as ei:
        interpret_payload_off(lines, first_line_no=100)
    assert ei.value.context["field"] == "total_time"
    assert ei.value.context["line_no"] == 100


def test_temperatures_are_checked_before_phase_readings(logs) -> None:
    lines = logs.deployment(current="150A")
    lines[4] = "LMS emitter: hot"
    with pytest.raises(TvacLogError) as ei:
        interpret_deployment(lines)
    assert ei.value.context["field"] == "temp_lms_emitter"

    lines = logs.emission()
    lines[2] = "[ OK ] Measured output voltage: 5V"
    lines[27] = "MSP: cold"
    with pytest.raises(TvacLogError) as ei:
        interpret_emission(lines)
    assert ei.value.context["field"] == "temp_msp"


def test_phase_readings_are_required() -> None:
    with pytest.raises(TypeError):
        DeploymentSample(time=ElapsedTime(1, 1), temperatures=Temperatures(*range(8)))  # type: ignore[call-arg]
    with pytest.raises(TypeError):
        EmissionSample(time=ElapsedTime(1, 1), temperatures=Temperatures(*range(8)))  # type: ignore[call-arg]


def test_negative_time_is_rejected(logs) -> None:
    with pytest.raises(TvacLogError) as ei:
        interpret_payload_off(logs.payload_off(total=-1))
    assert ei.value.kind is ErrorKind.NUMERIC_PARSE_FAILURE


def test_temperature_out_of_i16_range_is_rejected(logs) -> None:
    temps = list(range(22, 30))
    temps[3] = 40000
    with pytest.raises(TvacLogError) as ei:
        interpret_payload_off(logs.payload_off(temps=temps))
    assert ei.value.context["field"] == "temp_heater"


def test_wrong_length_is_typed_failure(logs) -> None:
    with pytest.raises(BlockLengthMismatch):
        interpret_lines(Phase.DEPLOYMENT, logs.payload_off())
    rec = interpret_lines(Phase.PAYLOAD_OFF, logs.payload_off())
    assert isinstance(rec, PayloadOffSample)

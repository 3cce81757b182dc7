"""Synthetic TVAC log builders shared by the test modules."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

import pytest

from tvac_log_analyzer.models.profile import ParserProfile

TEMP_LABELS = (
    "LMS emitter",
    "LMS receiver",
    "MSP",
    "Heater temp",
    "HVDC temp",
    "Tether monitoring",
    "Tether connector",
    "MSP 3V3 supply",
)

PREAMBLE_LEN = 3


def temperature_lines(temps: Sequence[int]) -> List[str]:
    assert len(temps) == 8
    return [f"{label}: {t}" for label, t in zip(TEMP_LABELS, temps)]


def time_lines(total: int, phase: int) -> List[str]:
    return [f"Total time: {total}", f"Phase time: {phase}"]


def payload_off_block(total: int = 120, phase: int = 5, temps: Sequence[int] = tuple(range(22, 30))) -> List[str]:
    return time_lines(total, phase) + temperature_lines(temps) + ["Payload power: OFF"]


def deployment_block(
    total: int = 300,
    phase: int = 10,
    current: str = "150mA",
    accuracy: str = "2.5%",
    temps: Sequence[int] = tuple(range(30, 38)),
) -> List[str]:
    return (
        time_lines(total, phase)
        + [
            f"[ OK ] Measured output current: {current}",
            f"[ OK ] Current measurement accuracy: {accuracy}",
        ]
        + temperature_lines(temps)
        + ["[ OK ] Pinpuller released"]
    )


def emission_block(
    total: int = 900,
    phase: int = 42,
    cathode: Tuple[int, int, str, str] = (259372, 1250, "0.5", "1.2"),
    bias: Tuple[int, int, str, str] = (-120000, -800, "0.7", "1.1"),
    heater: Tuple[int, int, str, str] = (5100, 1900, "0.8", "0.9"),
    repeller: Tuple[int, str] = (-1500, "0.3"),
    temps: Sequence[int] = (40, 41, 42, 43, 44, 45, -46, 47),
) -> List[str]:
    cv, ci, cva, cca = cathode
    bv, bi, bva, bca = bias
    hv, hi, hva, hca = heater
    rv, rva = repeller
    lines = time_lines(total, phase) + [
        f"[ OK ] Measured output voltage: {cv}mV",       # 2
        f"[ OK ] Measured output current: {ci}uA",       # 3
        "[ OK ] Cathode offset supply enabled",           # 4
        "[ OK ] Cathode offset setpoint reached",         # 5
        "[ OK ] Cathode offset output stable",            # 6
        f"[ OK ] Output voltage accuracy: {cva}%",        # 7
        f"[ OK ] Output current accuracy: {cca}%",        # 8
        f"[ OK ] Measured output voltage: {bv}mV",       # 9
        f"[ OK ] Measured output current: {bi}uA",       # 10
        "[ OK ] Tether bias supply enabled",              # 11
        "[ OK ] Tether bias setpoint reached",            # 12
        "[ OK ] Tether bias output stable",               # 13
        f"[ OK ] Output voltage accuracy: {bva}%",        # 14
        f"[ OK ] Output current accuracy: {bca}%",        # 15
        f"[ OK ] Measured output voltage: {hv}mV",       # 16
        f"[ OK ] Measured output current: {hi}mA",       # 17
        "[ OK ] Heater supply enabled",                   # 18
        "[ OK ] Heater setpoint reached",                 # 19
        f"[ OK ] Voltage accuracy: {hva}%",               # 20
        f"[ OK ] Current accuracy: {hca}%",               # 21
        f"[ OK ] Measured repeller voltage: {rv}mV",     # 22
        "[ OK ] Repeller supply enabled",                 # 23
        f"[ OK ] Voltage accuracy: {rva}%",               # 24
    ] + temperature_lines(temps)
    assert len(lines) == 33
    return lines


def build_log(
    blocks: Iterable[Tuple[Optional[str], Sequence[str]]],
    preamble: int = PREAMBLE_LEN,
    trailing_blank: bool = True,
) -> List[str]:
    """Preamble, then for each (marker, lines): blank separator, optional marker, block."""
    out = [f"SELF-TEST {i}: PASS" for i in range(preamble)]
    for marker, lines in blocks:
        out.append("")
        if marker is not None:
            out.append(marker)
        out.extend(lines)
    if trailing_blank:
        out.append("")
    return out


@pytest.fixture
def profile(tmp_path) -> ParserProfile:
    return ParserProfile(
        preamble_lines=PREAMBLE_LEN,
        failed_block_dir=str(tmp_path / "failed_chunks"),
        output_path=str(tmp_path / "out.csv"),
    )


@pytest.fixture
def logs():
    """Namespace of the builders above, for test modules."""

    class _Logs:
        payload_off = staticmethod(payload_off_block)
        deployment = staticmethod(deployment_block)
        emission = staticmethod(emission_block)
        temperatures = staticmethod(temperature_lines)
        build = staticmethod(build_log)
        preamble_len = PREAMBLE_LEN

    return _Logs

from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterable, List, Tuple

import pandas as pd

from tvac_log_analyzer.models.records import SampleRecord


# (record row key, table header, pandas dtype). Order is the output column order.
COLUMNS: Tuple[Tuple[str, str, str], ...] = (
    ("phase", "Payload state", "string"),
    ("total_time", "Total time (s)", "Int64"),
    ("phase_time", "Phase time (s)", "Int64"),
    ("temp_lms_emitter", "LMS emitter temp (°C)", "Int64"),
    ("temp_lms_receiver", "LMS receiver temp (°C)", "Int64"),
    ("temp_msp", "MSP temp (°C)", "Int64"),
    ("temp_heater", "Heater temp (°C)", "Int64"),
    ("temp_hvdc", "HVDC supply temp (°C)", "Int64"),
    ("temp_tether_monitoring", "Tether monitoring temp (°C)", "Int64"),
    ("temp_tether_connector", "Tether connector temp (°C)", "Int64"),
    ("temp_msp_3v3_supply", "MSP 3V3 supply temp (°C)", "Int64"),
    ("pinpuller_current", "Pinpuller current (mA)", "Int64"),
    ("pinpuller_accuracy", "Pinpuller accuracy (%)", "Float64"),
    ("cathode_offset_voltage", "Cathode offset voltage (mV)", "Int64"),
    ("cathode_offset_current", "Cathode offset current (uA)", "Int64"),
    ("cathode_offset_voltage_accuracy", "Cathode offset voltage accuracy (%)", "Float64"),
    ("cathode_offset_current_accuracy", "Cathode offset current accuracy (%)", "Float64"),
    ("tether_bias_voltage", "Tether bias voltage (mV)", "Int64"),
    ("tether_bias_current", "Tether bias current (uA)", "Int64"),
    ("tether_bias_voltage_accuracy", "Tether bias voltage accuracy (%)", "Float64"),
    ("tether_bias_current_accuracy", "Tether bias current accuracy (%)", "Float64"),
    ("heater_voltage", "Heater voltage (mV)", "Int64"),
    ("heater_current", "Heater current (mA)", "Int64"),
    ("heater_voltage_accuracy", "Heater voltage accuracy (%)", "Float64"),
    ("heater_current_accuracy", "Heater current accuracy (%)", "Float64"),
    ("repeller_voltage", "Repeller voltage (mV)", "Int64"),
    ("repeller_voltage_accuracy", "Repeller voltage accuracy (%)", "Float64"),
)

HEADERS: Tuple[str, ...] = tuple(h for _, h, _ in COLUMNS)


def records_to_frame(records: Iterable[SampleRecord]) -> pd.DataFrame:
    """
    One row per record, every row the same width.

    Fields that do not apply to a row's phase are <NA> (nullable dtypes keep
    integer columns integer).
    """
    rows: List[Dict[str, object]] = [r.to_row() for r in records]
    data = {header: [row[key] for row in rows] for key, header, _ in COLUMNS}
    df = pd.DataFrame(data, columns=list(HEADERS))
    return df.astype({header: dtype for _, header, dtype in COLUMNS})


def write_table(records: Iterable[SampleRecord], path: str | Path) -> Path:
    """Write the output table as CSV (header row, empty cells for nulls). Returns the path."""
    p = Path(path).expanduser()
    df = records_to_frame(records)
    with p.open("w", encoding="utf-8", newline="") as fh:
        df.to_csv(fh, index=False)
    return p

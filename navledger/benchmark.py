"""
Benchmark - Aligns an index series to the portfolio date axis and rebases it to 100.

Usage:
    records = normalize(index_history, [r.date for r in portfolio_records])
    pct = total_return(records)
"""

from navledger.models import BenchmarkRecord

BASE_VALUE = 100.0


def normalize(raw_series: dict[str, float], date_axis: list[str]) -> list[BenchmarkRecord]:
    """
    Build one benchmark record per date on the axis.

    Dates without a quote carry the previous raw value forward, starting from
    the latest quote before the axis. The first positive raw value becomes
    100; dates before it keep a normalized value of 0.
    """
    records: list[BenchmarkRecord] = []
    last_value = 0.0
    if date_axis:
        earlier = [d for d, v in raw_series.items() if v and d < date_axis[0]]
        if earlier:
            last_value = raw_series[max(earlier)]
    for date_str in date_axis:
        quote = raw_series.get(date_str)
        if quote:
            last_value = quote
        records.append(BenchmarkRecord(date=date_str, raw_value=last_value))

    base = next((r.raw_value for r in records if r.raw_value > 0), None)
    if base is None:
        return records

    for record in records:
        if record.raw_value > 0:
            record.normalized_value = BASE_VALUE * record.raw_value / base
    return records


def total_return(records: list[BenchmarkRecord]) -> float:
    """Percent change between the first and last positive raw values."""
    valid = [r.raw_value for r in records if r.raw_value > 0]
    if not valid:
        return 0.0
    return (valid[-1] - valid[0]) / valid[0] * 100

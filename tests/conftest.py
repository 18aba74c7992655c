"""
Shared fixtures: one real K1 Speed race in plaintext and HTML form.
"""

from datetime import datetime

import pytest

from core.models import ParsedRaceEmail, RaceInfo, RaceResult

SUBJECT = "Your Race Results at K1 Speed Anaheim T1 12/29/25 07:17 PM"

HEADER = ("#", "Racer", "Best Time", "Best Lap", "Laps", "Avg.", "Gap", "K1RS")

ROWS = [
    ("1", "Kevin Ruiz", "28.844", "8", "11", "36.975", "0.000", "1244 (+44)"),
    ("2", "Lam Le", "28.857", "9", "12", "34.283", "0.013", "1584 (+40)"),
    ("3", "Irl Strachan", "29.022", "5", "11", "39.160", "0.178", "1356 (+32)"),
    ("4", "Sakal Strachan", "29.149", "5", "11", "37.985", "0.305", "1376 (+28)"),
    ("5", "Darren Van", "29.232", "10", "12", "34.668", "0.388", "1360 (+24)"),
    ("6", "Ignacio Ruiz", "29.545", "9", "11", "38.050", "0.701", "1220 (+20)"),
    ("7", "Kai Sivadasan", "29.548", "9", "11", "37.958", "0.704", "1326 (+16)"),
    ("8", "Harrison Le", "29.714", "10", "12", "34.759", "0.870", "1292 (+12)"),
    ("9", "Adalia Almanza", "32.039", "9", "9", "44.033", "3.195", "1208 (+8)"),
    ("10", "Giovanni Almanza", "33.292", "8", "10", "43.115", "4.448", "1204 (+4)"),
]


def text_table(rows=ROWS) -> str:
    lines = ["", "\t".join(HEADER)]
    lines += ["\t".join(row) for row in rows]
    return "\n".join(lines) + "\n"


def html_table(rows=ROWS) -> str:
    header = "".join(f"<th>{cell}</th>" for cell in HEADER)
    body = "\n".join(
        "<tr>" + "".join(f'<td class="cell">{cell}</td>' for cell in row) + "</tr>"
        for row in rows
    )
    return (
        "<html><head><style>td { padding: 4px; }</style></head>\n"
        "<body>\n"
        "<p>Thanks for racing at K1 Speed!</p>\n"
        '<table border="0">\n'
        f"<tr>{header}</tr>\n"
        f"{body}\n"
        "</table>\n"
        "<script>var tracking = 1;</script>\n"
        "</body></html>"
    )


@pytest.fixture
def subject() -> str:
    return SUBJECT


@pytest.fixture
def text_body() -> str:
    return text_table()


@pytest.fixture
def html_body() -> str:
    return html_table()


def make_result(position: int, racer: str, best_time: str = "30.000") -> RaceResult:
    return RaceResult(
        position=position,
        racer=racer,
        best_time=best_time,
        best_lap=5,
        laps=10,
        avg="35.000",
        gap="0.000",
        k1rs="1200 (+10)",
    )


def make_race(results, date=datetime(2025, 12, 29, 19, 17), location="K1 Speed Anaheim", track="T1"):
    return ParsedRaceEmail(
        race_info=RaceInfo(location=location, track=track, date=date, raw_subject="subject"),
        results=tuple(results),
        raw_body="",
    )


@pytest.fixture
def race_factory():
    return make_race


@pytest.fixture
def result_factory():
    return make_result


@pytest.fixture
def build_text():
    return text_table


@pytest.fixture
def build_html():
    return html_table

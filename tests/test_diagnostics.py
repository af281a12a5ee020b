import logging

from src.core.diagnostics import AlertLog, DiagnosticKind, NullSink


def test_keyed_reports_are_deduplicated(caplog):
    caplog.set_level(logging.DEBUG, logger="src.core.diagnostics")
    sink = AlertLog()

    sink.report("debug", "Unknown location: Nowhere.", key="UnknownLocation:Nowhere")
    sink.report("debug", "Unknown location: Nowhere.", key="UnknownLocation:Nowhere")
    sink.report("warning", "Host is missing the locator.")
    sink.report("warning", "Host is missing the locator.")

    assert sink.records == [
        ("debug", "Unknown location: Nowhere."),
        ("warning", "Host is missing the locator."),
        ("warning", "Host is missing the locator."),
    ]
    assert [record.levelno for record in caplog.records] == [logging.DEBUG, logging.WARNING, logging.WARNING]


def test_clear_forgets_flags():
    sink = AlertLog()
    sink.report("info", "once", key="k")
    sink.clear()
    sink.report("info", "once", key="k")

    assert sink.records == [("info", "once")]


def test_custom_logger_receives_messages(caplog):
    log = logging.getLogger("worldmap.test")
    caplog.set_level(logging.INFO, logger="worldmap.test")

    AlertLog(log).report("info", "rebuilt")

    assert caplog.records[0].name == "worldmap.test"
    assert caplog.records[0].getMessage() == "rebuilt"


def test_kind_keys():
    assert DiagnosticKind.UNKNOWN_LOCATION.key("Nowhere") == "UnknownLocation:Nowhere"
    assert DiagnosticKind.DEGENERATE_BRACKET.value == "DegenerateBracket"


def test_null_sink_accepts_reports():
    assert NullSink().report("error", "ignored", key="x") is None

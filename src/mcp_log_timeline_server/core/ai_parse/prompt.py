"""Prompt construction for AI parsing."""

from __future__ import annotations

from ..models import Severity


def build_ai_parse_prompt(lines_text: str) -> str:
    """Build the Gemini prompt that structures raw log lines."""
    levels = ", ".join(level.value for level in Severity)
    return (
        "You are an expert log file analysis agent.\n"
        "Parse the raw log lines below (syslog, Windows Event Log, or any custom "
        "application format) into structured entries.\n"
        "For each entry extract:\n"
        "- timestamp: ISO 8601 (YYYY-MM-DDTHH:mm:ss.sssZ). Be precise.\n"
        f"- level: one of {levels}. If no level is present infer it from the message "
        "(e.g. 'fail' implies Error); default to Information.\n"
        '- source: the process, service or component; "Unknown" if it cannot be inferred.\n'
        "- message: the core message of the entry.\n"
        "Return ONLY valid JSON that matches the provided schema. "
        "Ignore lines that are not log entries.\n\n"
        f"LOG LINES:\n{lines_text}\n"
    )

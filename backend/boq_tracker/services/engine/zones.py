"""Zone label normalization.

Zone labels are typed by hand on both sides ("Zone 2", "Z-2", "2",
"P5066-2", "P5066 - Zone 2"). Everything here converges on a lower-cased
label without the project-code prefix and a numeric token used for
equality.
"""
import re

_ZONE_RE = re.compile(r"zone\s*[-_]?\s*(\d+)", re.IGNORECASE)
_TRAILING_NUMBER_RE = re.compile(r"(\d+)\s*$")
_ANY_NUMBER_RE = re.compile(r"\d+")
_SPACES_RE = re.compile(r"\s+")


def _strip_code_prefix(zone: str, code: str) -> str:
    c = re.escape(code.strip().upper())
    zone = re.sub(rf"^{c}\s*-\s*", "", zone, flags=re.IGNORECASE).strip()
    zone = re.sub(rf"^{c}\s+", "", zone, flags=re.IGNORECASE).strip()
    zone = re.sub(rf"^{c}-", "", zone, flags=re.IGNORECASE).strip()
    return zone


def normalize_zone(raw_zone: str | None, project_code: str | None) -> str:
    zone = (raw_zone or "").strip()
    if not zone or not (project_code or "").strip():
        return zone.lower()

    zone = _strip_code_prefix(zone, project_code)
    zone = re.sub(r"^\s*-\s*", "", zone)
    zone = _SPACES_RE.sub(" ", zone).strip()
    return zone.lower()


def extract_zone_number(zone: str | None) -> str:
    z = (zone or "").strip().lower()
    if not z:
        return ""

    m = _ZONE_RE.search(z)
    if m:
        return m.group(1)
    m = _TRAILING_NUMBER_RE.search(z)
    if m:
        return m.group(1)
    m = _ANY_NUMBER_RE.search(z)
    if m:
        return m.group(0)
    return z


def zone_from_text(text: str | None, project_code: str | None = None) -> str:
    """Pull a zone token out of description text, "" when none is found."""
    t = (text or "").strip()
    if not t:
        return ""
    m = _ZONE_RE.search(t)
    if m:
        return f"zone {m.group(1)}"
    code = (project_code or "").strip()
    if code:
        m = re.search(rf"\b{re.escape(code)}-(\d+)\b", t, flags=re.IGNORECASE)
        if m:
            return f"zone {m.group(1)}"
    return ""


def effective_zone(zone_label: str | None, project_code: str | None, description: str | None = None) -> str:
    zone = normalize_zone(zone_label, project_code)
    if zone:
        return zone
    return zone_from_text(description, project_code)


def _has_standalone(number: str, text: str) -> bool:
    return re.search(rf"\b{re.escape(number)}\b", text) is not None


def zones_match(activity_zone: str, kpi_zone: str) -> bool:
    """Compare two normalized zones.

    An empty activity zone accepts anything. Otherwise the KPI must carry a
    zone with the same extracted number. When the numbers agree but neither
    label contains the other, at least one side must hold the number as a
    standalone token, otherwise "zone2a" would pair with "area2b".
    """
    if not activity_zone:
        return True
    if not kpi_zone:
        return False

    a_num = extract_zone_number(activity_zone)
    k_num = extract_zone_number(kpi_zone)
    if a_num != k_num:
        return False
    if not a_num.isdigit():
        return True

    if activity_zone == kpi_zone or activity_zone in kpi_zone or kpi_zone in activity_zone:
        return True
    return _has_standalone(a_num, activity_zone) or _has_standalone(k_num, kpi_zone)

"""Observation parsing for CCTV survey text.

This module turns one free-text survey observation into a
``ParsedObservation``. Formats are tried as an ordered list of strategies,
most specific first; the first strategy that matches wins.
"""

import logging
import re
from dataclasses import dataclass
from typing import Callable, Iterable, List, NamedTuple, Optional, Pattern, Tuple

from ..config.models import ReferenceData
from ..interfaces.parser import IObservationParser
from ..models.observation import ParsedObservation

logger = logging.getLogger(__name__)

_CODE = r"(?P<code>S/A|[A-Z]{1,5})"


def _number(name: str) -> str:
    # A malformed figure such as "3.2.1" is captured whole so float() rejects it
    return rf"(?P<{name}>\d[\d.]*)(?![\d.]|\s*%)"


class ObservationMatch(NamedTuple):
    """Raw fields pulled out of one observation by a strategy."""
    code: str
    meterage_start: Optional[float]
    meterage_end: Optional[float]
    description: str


def _to_float(value: Optional[str]) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def _normalize_code(code: str) -> str:
    return "SA" if code == "S/A" else code


def _join(*parts: str) -> str:
    return " ".join(p.strip(" ,;") for p in parts if p and p.strip(" ,;"))


@dataclass(frozen=True)
class ParserStrategy:
    """One observation format: a pattern plus a builder for its match."""
    name: str
    pattern: Pattern
    build: Callable[["re.Match"], Optional[ObservationMatch]]

    def __call__(self, text: str) -> Optional[ObservationMatch]:
        match = self.pattern.match(text)
        if not match:
            return None
        return self.build(match)


def _build_point(match: "re.Match") -> Optional[ObservationMatch]:
    meterage = _to_float(match.group("m"))
    if meterage is None:
        return None
    rest = match.groupdict().get("rest") or ""
    return ObservationMatch(_normalize_code(match.group("code")), meterage, None, _join(match.group("desc"), rest))


def _build_range(match: "re.Match") -> Optional[ObservationMatch]:
    start = _to_float(match.group("start"))
    end = _to_float(match.group("end"))
    if start is None or end is None:
        return None
    return ObservationMatch(
        _normalize_code(match.group("code")),
        start,
        end,
        _join(match.group("desc"), match.group("rest")),
    )


def _build_unmetered(match: "re.Match") -> Optional[ObservationMatch]:
    return ObservationMatch(_normalize_code(match.group("code")), None, None, _join(match.group("desc")))


STRATEGIES: Tuple[ParserStrategy, ...] = (
    # DER 13.07m (Settled deposits, coarse)
    ParserStrategy(
        name="code_meterage_parenthesized",
        pattern=re.compile(rf"^{_CODE}\s+{_number('m')}\s*m?\s*\((?P<desc>.*)\)\s*$"),
        build=_build_point,
    ),
    # DER 13.07m: Settled deposits, coarse
    ParserStrategy(
        name="code_meterage_colon",
        pattern=re.compile(rf"^{_CODE}\s+{_number('m')}\s*m?\s*:\s*(?P<desc>.+)$"),
        build=_build_point,
    ),
    # JN (Junction at 2 o'clock)
    ParserStrategy(
        name="code_parenthesized",
        pattern=re.compile(rf"^{_CODE}\s*\((?P<desc>.*)\)\s*$"),
        build=_build_unmetered,
    ),
    # DES Settled deposits from 2.0m to 4.5m
    ParserStrategy(
        name="code_range",
        pattern=re.compile(
            rf"^{_CODE}\s+(?P<desc>.+?)\s+(?i:from)\s+{_number('start')}\s*m?"
            rf"\s+(?i:to)\s+{_number('end')}\s*m?(?P<rest>.*)$"
        ),
        build=_build_range,
    ),
    # FC Fracture circumferential at 3.0m
    ParserStrategy(
        name="code_at_point",
        pattern=re.compile(rf"^{_CODE}\s+(?P<desc>.+?)\s+(?i:at)\s+{_number('m')}\s*m?(?P<rest>.*)$"),
        build=_build_point,
    ),
    # Fallback: leading code token, remainder as description
    ParserStrategy(
        name="leading_code",
        pattern=re.compile(r"^(?P<code>S/A|[A-Z]{2,5})(?![A-Za-z/])[\s:,.-]*(?P<desc>.*)$"),
        build=_build_unmetered,
    ),
)


@dataclass(frozen=True)
class SynthesisRule:
    """
    Bounded rule that recovers a code from description text.

    Fires when any phrase is present and, if set, ``requires`` is too.
    """
    code: str
    phrases: Tuple[str, ...]
    requires: Optional[str] = None

    def applies(self, lowered: str) -> bool:
        if self.requires and self.requires not in lowered:
            return False
        return any(p in lowered for p in self.phrases)


SYNTHESIS_RULES: Tuple[SynthesisRule, ...] = (
    SynthesisRule(code="OJM", phrases=("open joint",), requires="major"),
    SynthesisRule(code="OJL", phrases=("open joint",)),
    SynthesisRule(code="DEF", phrases=("deformity", "deformed")),
)

_AT_METERAGE = re.compile(r"\bat\s+(\d+(?:\.\d+)?)\s*m\b", re.IGNORECASE)
_ANY_METERAGE = re.compile(r"(\d+(?:\.\d+)?)\s*m\b")


class ObservationParser(IObservationParser):
    """
    Parser for CCTV survey observation strings.

    Categories are looked up in the taxonomy at parse time, so the
    structural and service flags of a parsed observation always agree
    with the reference data it was parsed against.
    """

    def __init__(
        self,
        reference_data: ReferenceData,
        strategies: Tuple[ParserStrategy, ...] = STRATEGIES,
        synthesis_rules: Tuple[SynthesisRule, ...] = SYNTHESIS_RULES,
    ):
        self._reference = reference_data
        self._strategies = strategies
        self._synthesis_rules = synthesis_rules

    @property
    def strategies(self) -> Tuple[ParserStrategy, ...]:
        return self._strategies

    def parse(self, text: str) -> Optional[ParsedObservation]:
        if not text or not text.strip():
            return None
        text = text.strip()

        match, strategy_name = self._match(text)
        if match is None or not self._is_known(match.code):
            synthesized = self._synthesize(text)
            if synthesized is not None:
                return synthesized

        if match is None:
            logger.debug(f"No code found in observation: {text!r}")
            return None

        logger.debug(f"Parsed {text!r} with strategy '{strategy_name}' as {match.code}")
        return ParsedObservation(
            code=match.code,
            meterage_start=match.meterage_start,
            meterage_end=match.meterage_end,
            description=match.description,
            full_text=text,
            category=self._reference.category_of(match.code),
        )

    def parse_many(self, texts: Iterable[str]) -> Tuple[List[ParsedObservation], List[str]]:
        parsed: List[ParsedObservation] = []
        unparsed: List[str] = []
        for text in texts:
            observation = self.parse(text)
            if observation is None:
                if text and text.strip():
                    unparsed.append(text.strip())
            else:
                parsed.append(observation)
        return parsed, unparsed

    def _match(self, text: str) -> Tuple[Optional[ObservationMatch], Optional[str]]:
        for strategy in self._strategies:
            match = strategy(text)
            if match is not None:
                return match, strategy.name
        return None, None

    def _is_known(self, code: str) -> bool:
        vocabulary = self._reference.vocabulary
        return (
            code in self._reference.taxonomy
            or vocabulary.is_metadata(code)
            or vocabulary.is_junction(code)
            or vocabulary.is_observation(code)
        )

    def _synthesize(self, text: str) -> Optional[ParsedObservation]:
        """Recover a taxonomy code from defect wording with no usable code."""
        lowered = text.lower()
        for rule in self._synthesis_rules:
            if not rule.applies(lowered) or rule.code not in self._reference.taxonomy:
                continue
            at_match = _AT_METERAGE.search(text) or _ANY_METERAGE.search(text)
            meterage = _to_float(at_match.group(1)) if at_match else None
            logger.debug(f"Synthesized code {rule.code} for {text!r}")
            return ParsedObservation(
                code=rule.code,
                meterage_start=meterage,
                meterage_end=None,
                description=text,
                full_text=text,
                category=self._reference.category_of(rule.code),
                synthesized=True,
            )
        return None

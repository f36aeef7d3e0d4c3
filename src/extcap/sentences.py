"""
Provider output parser.

Providers answer discovery queries with one sentence per line:

    interface {value=eth0}{display=Example interface}
    dlt {number=147}{name=USER0}{display=Demo}
    arg {number=0}{call=--delay}{display=Delay}{type=integer}{range=1,15}
    value {arg=0}{value=if1}{display=Remote 1}{default=true}

Unknown keywords and malformed records are dropped.
"""
from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional

from .linktypes import dlt_name
from .models import ArgumentDescriptor, ArgumentValue, LinkType

logger = logging.getLogger(__name__)

_PARAM_RE = re.compile(r"\{([^=}]+)=([^}]*)\}")

ARG_TYPES = {
    "integer", "unsigned", "long", "double", "boolean", "boolflag",
    "menu", "radio", "selector", "string", "password", "multicheck",
    "fileselect",
}


@dataclass
class Sentence:
    keyword: str
    params: Dict[str, str]


@dataclass
class InterfaceRecord:
    call: str
    display: str


def tokenize_sentences(output: str) -> List[Sentence]:
    sentences = []
    for line in output.splitlines():
        line = line.strip()
        brace = line.find("{")
        if brace <= 0:
            continue
        keyword = line[:brace].strip().lower()
        params = {key.strip().lower(): value
                  for key, value in _PARAM_RE.findall(line[brace:])}
        sentences.append(Sentence(keyword, params))
    return sentences


def _to_int(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def _to_bool(value: Optional[str]) -> bool:
    return value is not None and value.strip().lower() in ("true", "1", "yes")


class ISentenceParser(ABC):
    """Turns raw provider stdout into records."""

    @abstractmethod
    def parse_interfaces(self, output: str) -> List[InterfaceRecord]:
        raise NotImplementedError

    @abstractmethod
    def parse_dlts(self, output: str) -> List[LinkType]:
        raise NotImplementedError

    @abstractmethod
    def parse_args(self, output: str) -> List[ArgumentDescriptor]:
        raise NotImplementedError


class ExtcapSentenceParser(ISentenceParser):

    def parse_interfaces(self, output: str) -> List[InterfaceRecord]:
        records = []
        for sentence in tokenize_sentences(output):
            if sentence.keyword != "interface":
                continue
            call = sentence.params.get("value")
            if not call:
                logger.debug("Skipping interface sentence without value: %s", sentence.params)
                continue
            records.append(InterfaceRecord(call, sentence.params.get("display", call)))
        return records

    def parse_dlts(self, output: str) -> List[LinkType]:
        link_types = []
        for sentence in tokenize_sentences(output):
            if sentence.keyword != "dlt":
                continue
            number = _to_int(sentence.params.get("number"))
            if number is None:
                logger.debug("Skipping dlt sentence without number: %s", sentence.params)
                continue
            name = sentence.params.get("name") or dlt_name(number) or str(number)
            display = sentence.params.get("display") or name
            link_types.append(LinkType(number, name, display))
        return link_types

    def parse_args(self, output: str) -> List[ArgumentDescriptor]:
        args: Dict[int, ArgumentDescriptor] = {}
        pending_values: List[ArgumentValue] = []

        for sentence in tokenize_sentences(output):
            params = sentence.params
            if sentence.keyword == "arg":
                number = _to_int(params.get("number"))
                call = params.get("call")
                if number is None or not call:
                    continue
                arg_type = params.get("type", "").lower()
                range_start = range_end = None
                if "range" in params:
                    range_start, _, range_end = params["range"].partition(",")
                    range_end = range_end or None
                args[number] = ArgumentDescriptor(
                    number=number,
                    call=call,
                    display=params.get("display", call),
                    arg_type=arg_type if arg_type in ARG_TYPES else "unknown",
                    tooltip=params.get("tooltip"),
                    range_start=range_start or None,
                    range_end=range_end,
                    default=params.get("default"),
                    required=_to_bool(params.get("required")),
                )
            elif sentence.keyword == "value":
                arg_number = _to_int(params.get("arg"))
                value = params.get("value")
                if arg_number is None or value is None:
                    continue
                pending_values.append(ArgumentValue(
                    arg_number=arg_number,
                    value=value,
                    display=params.get("display", value),
                    is_default=_to_bool(params.get("default")),
                ))

        # value sentences may precede their arg
        for value in pending_values:
            arg = args.get(value.arg_number)
            if arg is not None:
                arg.values.append(value)

        return list(args.values())

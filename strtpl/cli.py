from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .config import ConfigLoadError, builder_for, load_preset, read_presets, resolve_presets_file
from .errors import StrTemplateError
from .jsonic import dumps as jdumps
from .report_schema import MatchResult, PlaceholderInfo, PresetInfo, PresetsList
from .template import (
    IndexedPlaceholder,
    NamedPlaceholderTemplate,
    NamedPlaceholderTemplateBuilder,
    PositionalPlaceholder,
    SinglePlaceholderTemplate,
    SinglePlaceholderTemplateBuilder,
    StrTemplate,
    of,
    of_named,
)
from .template.features import parse_features
from .version import tool_version

AnyBuilder = Union[NamedPlaceholderTemplateBuilder, SinglePlaceholderTemplateBuilder]


def _setup_logging(verbose: bool) -> None:
    if not (verbose or os.environ.get("STRTPL_DEBUG")):
        return
    log = logging.getLogger("strtpl")
    log.setLevel(logging.DEBUG)
    if not log.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
        log.addHandler(h)


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="strtpl",
        description="String templates: format and reverse matching",
        add_help=True,
    )
    p.add_argument("-v", "--version", action="version", version=f"%(prog)s {tool_version()}")
    p.add_argument("--verbose", action="store_true", help="отладочный лог в stderr")
    sub = p.add_subparsers(dest="cmd", required=True)

    # Общие аргументы для format/match
    def add_common(sp: argparse.ArgumentParser) -> None:
        sp.add_argument(
            "target",
            help="текст шаблона или @<name> для пресета из файла конфигурации",
        )
        sp.add_argument("--config", metavar="FILE", help="файл пресетов (по умолчанию ./strtpl.yaml)")
        sp.add_argument(
            "--single",
            action="store_true",
            help="шаблон с одиночным плейсхолдером вместо именованных",
        )
        sp.add_argument("--prefix", help="начало именованного плейсхолдера (по умолчанию '{')")
        sp.add_argument("--suffix", help="конец именованного плейсхолдера (по умолчанию '}')")
        sp.add_argument("--placeholder", help="одиночный плейсхолдер (по умолчанию '{}')")
        sp.add_argument("--escape", help="символ экранирования (по умолчанию '\\')")
        sp.add_argument(
            "--feature",
            action="append",
            metavar="NAME",
            help="добавить стратегию (можно указать несколько)",
        )
        sp.add_argument(
            "--no-feature",
            action="append",
            metavar="NAME",
            help="убрать стратегию (можно указать несколько)",
        )
        sp.add_argument("--default", metavar="TEXT", help="значение по умолчанию")

    sp_format = sub.add_parser("format", help="Подставить значения в шаблон (текст)")
    add_common(sp_format)
    sp_format.add_argument(
        "--arg",
        action="append",
        metavar="VALUE",
        help="значение по порядку (можно указать несколько)",
    )
    sp_format.add_argument(
        "--var",
        action="append",
        metavar="KEY=VALUE",
        help="значение по имени переменной (можно указать несколько)",
    )
    sp_format.add_argument(
        "--indexed",
        action="store_true",
        help="--arg подставляются по индексу плейсхолдера, а не по порядку",
    )

    sp_match = sub.add_parser("match", help="Разобрать строку по шаблону (JSON)")
    add_common(sp_match)
    sp_match.add_argument("input", help="разбираемая строка")

    sp_list = sub.add_parser("list", help="Списки сущностей (JSON)")
    sp_list.add_argument("what", choices=["presets"], help="что вывести")
    sp_list.add_argument("--config", metavar="FILE", help="файл пресетов (по умолчанию ./strtpl.yaml)")

    return p


# -------------------- Сборка шаблона из аргументов --------------------

def _parse_vars(items: Optional[List[str]]) -> Dict[str, str]:
    """Парсит список 'key=value' в словарь."""
    result: Dict[str, str] = {}
    for item in items or []:
        if "=" not in item:
            raise ValueError(f"Invalid variable format '{item}'. Expected 'key=value'")
        key, value = item.split("=", 1)
        result[key] = value
    return result


def _make_builder(ns: argparse.Namespace) -> AnyBuilder:
    if ns.target.startswith("@"):
        path = resolve_presets_file(ns.config)
        return builder_for(load_preset(path, ns.target[1:]))
    if ns.single:
        return of(ns.target)
    return of_named(ns.target)


def _build_template(ns: argparse.Namespace) -> StrTemplate:
    builder = _make_builder(ns)

    if isinstance(builder, SinglePlaceholderTemplateBuilder):
        if ns.prefix is not None or ns.suffix is not None:
            raise ValueError("--prefix/--suffix are not applicable to a single-placeholder template")
        if ns.placeholder is not None:
            builder.placeholder(ns.placeholder)
    else:
        if ns.placeholder is not None:
            raise ValueError("--placeholder requires a single-placeholder template (--single)")
        if ns.prefix is not None:
            builder.prefix(ns.prefix)
        if ns.suffix is not None:
            builder.suffix(ns.suffix)

    if ns.escape is not None:
        builder.escape(ns.escape)
    builder.add_features(*parse_features(ns.feature or []))
    builder.remove_features(*parse_features(ns.no_feature or []))
    if ns.default is not None:
        builder.default_value(ns.default)
    return builder.build()


# -------------------- Команды --------------------

def _run_format(ns: argparse.Namespace) -> str:
    template = _build_template(ns)
    args = list(ns.arg or [])
    variables = _parse_vars(ns.var)
    if args and variables:
        raise ValueError("Use either --arg or --var, not both")

    if isinstance(template, SinglePlaceholderTemplate):
        if variables:
            raise ValueError("--var requires a named template")
        return template.format(*args)

    assert isinstance(template, NamedPlaceholderTemplate)
    if args:
        if ns.indexed:
            return template.format_indexed(*args)
        return template.format_sequence(*args)
    return template.format(variables)


def _run_match(ns: argparse.Namespace) -> MatchResult:
    template = _build_template(ns)
    text = ns.input
    matched = template.is_matches(text)

    values: Dict[str, Optional[str]] = {}
    if isinstance(template, NamedPlaceholderTemplate):
        sequence = template.matches_sequence(text)
        values = template.matches(text)
    else:
        assert isinstance(template, SinglePlaceholderTemplate)
        sequence = template.matches(text)

    return MatchResult(template=template.template, input=text, matched=matched, values=values, sequence=sequence)


def _placeholder_kind(segment: Any) -> str:
    if isinstance(segment, PositionalPlaceholder):
        return "positional"
    if isinstance(segment, IndexedPlaceholder):
        return "indexed"
    return "named"


def _run_list_presets(ns: argparse.Namespace) -> PresetsList:
    path = resolve_presets_file(ns.config)
    cfg = read_presets(path)
    presets: List[PresetInfo] = []
    for name in sorted(cfg.templates):
        preset = cfg.templates[name]
        template = builder_for(preset).build()
        presets.append(PresetInfo(
            name=name,
            kind=preset.kind.value,
            template=preset.template,
            description=preset.description,
            placeholders=[
                PlaceholderInfo(kind=_placeholder_kind(s), key=s.key, text=s.text)
                for s in template.placeholder_segments
            ],
            features=[f.name for f in template.features],
        ))
    return PresetsList(config_path=str(Path(path)), presets=presets)


def main(argv: list[str] | None = None) -> int:
    ns = _build_parser().parse_args(argv)
    _setup_logging(bool(getattr(ns, "verbose", False)))

    try:
        if ns.cmd == "format":
            sys.stdout.write(_run_format(ns))
            return 0

        if ns.cmd == "match":
            result = _run_match(ns)
            sys.stdout.write(jdumps(result.model_dump(mode="json")))
            return 0

        if ns.cmd == "list":
            if ns.what == "presets":
                data = _run_list_presets(ns).model_dump(mode="json", by_alias=True)
            else:
                raise ValueError(f"Unknown list target: {ns.what}")
            sys.stdout.write(jdumps(data))
            return 0

    except ConfigLoadError as e:
        sys.stderr.write(f"Config error: {str(e).rstrip()}\n")
        return 2
    except (StrTemplateError, ValueError) as e:
        sys.stderr.write(str(e).rstrip() + "\n")
        return 2

    return 2


if __name__ == "__main__":
    raise SystemExit(main())

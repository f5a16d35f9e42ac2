import json
import os
import subprocess
import sys
import textwrap
from pathlib import Path

import pytest

from strtpl.template import reset_global_defaults

REPO_ROOT = Path(__file__).resolve().parent.parent


@pytest.fixture(autouse=True)
def _reset_globals():
    """Глобальные стратегии и обработчик по умолчанию не протекают между тестами."""
    reset_global_defaults()
    yield
    reset_global_defaults()


def write(p: Path, text: str) -> Path:
    """Записывает текст в файл, создавая родительские директории при необходимости."""
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(textwrap.dedent(text).lstrip(), encoding="utf-8")
    return p


@pytest.fixture
def presets_file(tmp_path: Path) -> Path:
    """Файл strtpl.yaml с тремя пресетами разных видов."""
    return write(
        tmp_path / "strtpl.yaml",
        """
        templates:
          select:
            template: "select * from #[tableName] where id = #[id]"
            prefix: "#["
            suffix: "]"
            description: "SQL по имени таблицы"
          log:
            template: "this is {} for {}"
            kind: single
            add_features: [match_keep_null_str]
          question:
            template: "a=? b=?"
            kind: single
            placeholder: "?"
            features: [FORMAT_MISSING_KEY_PRINT_DEFAULT_VALUE]
            default_value: "-"
        """,
    )


def run_cli(root: Path, *args: str) -> subprocess.CompletedProcess:
    env = os.environ.copy()
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(REPO_ROOT), env.get("PYTHONPATH")]))
    env.pop("STRTPL_DEBUG", None)
    return subprocess.run(
        [sys.executable, "-m", "strtpl.cli", *args],
        cwd=root, env=env, capture_output=True, text=True, encoding="utf-8"
    )


def jload(s: str):
    return json.loads(s)

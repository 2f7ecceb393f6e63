from __future__ import annotations

import subprocess
import sys
from pathlib import Path

SCRIPT_PATH = Path(__file__).resolve().parents[2] / "tools" / "depcheck.py"


def _run(*args: str) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, str(SCRIPT_PATH), *args],
        capture_output=True,
        text=True,
        check=False,
    )


def test_depcheck_fails_on_forbidden_domain_import(tmp_path: Path) -> None:
    domain_dir = tmp_path / "domain"
    domain_dir.mkdir(parents=True, exist_ok=True)
    violating_file = domain_dir / "model.py"
    violating_file.write_text("from pydantic import BaseModel\n", encoding="utf-8")

    result = _run("--path", str(domain_dir))

    combined_output = f"{result.stdout}\n{result.stderr}"
    assert result.returncode != 0
    assert "pydantic" in combined_output
    assert str(violating_file) in combined_output


def test_application_layer_may_not_import_infrastructure(tmp_path: Path) -> None:
    module = tmp_path / "use_case.py"
    module.write_text(
        "import httpx\nfrom orderdesk.infrastructure.http.client import HttpRestaurantBackend\n",
        encoding="utf-8",
    )

    result = _run("--layer", "application", "--path", str(module))

    assert result.returncode != 0
    assert "[application] -> httpx" in result.stdout
    assert "orderdesk.infrastructure.http.client" in result.stdout


def test_application_layer_allows_pydantic(tmp_path: Path) -> None:
    module = tmp_path / "dto.py"
    module.write_text("from pydantic import BaseModel\n", encoding="utf-8")

    result = _run("--layer", "application", "--path", str(module))

    assert result.returncode == 0
    assert "depcheck passed" in result.stdout


def test_repository_layers_pass() -> None:
    result = _run()

    assert result.returncode == 0, result.stdout

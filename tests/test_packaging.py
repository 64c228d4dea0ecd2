"""
Перевірка, що встановлений пакет містить усі модулі, потрібні main.py.
"""

import ast
from pathlib import Path

import pytest

tomllib = pytest.importorskip("tomllib")

ROOT = Path(__file__).resolve().parent.parent


def local_imports(path: Path) -> set:
    """Імена верхнього рівня, які модуль імпортує з цього проєкту."""
    tree = ast.parse(path.read_text(encoding='utf-8'))
    names = set()
    for node in ast.walk(tree):
        if isinstance(node, ast.ImportFrom) and node.module:
            names.add(node.module.split('.')[0])
        elif isinstance(node, ast.Import):
            names.update(alias.name.split('.')[0] for alias in node.names)
    return {name for name in names if (ROOT / name).is_dir() or (ROOT / f"{name}.py").is_file()}


class TestPackaging:

    def test_packages_cover_entry_point_imports(self):
        setuptools_config = tomllib.loads((ROOT / "pyproject.toml").read_text(encoding='utf-8'))['tool']['setuptools']
        installed = set(setuptools_config['packages']) | set(setuptools_config['py-modules'])

        modules = [ROOT / "main.py"]
        for package in setuptools_config['packages']:
            modules.extend((ROOT / package).glob("*.py"))

        missing = set()
        for module in modules:
            missing |= local_imports(module) - installed

        assert missing == set()

    def test_listed_packages_exist(self):
        setuptools_config = tomllib.loads((ROOT / "pyproject.toml").read_text(encoding='utf-8'))['tool']['setuptools']

        for package in setuptools_config['packages']:
            assert list((ROOT / package).glob("*.py")), package

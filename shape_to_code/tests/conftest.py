"""
Shared fixtures: test models and a helper generating, writing and importing
a package.
"""

from __future__ import annotations

import importlib
import json
import uuid
from pathlib import Path

import pytest

from shape_to_code.pipeline import CodeGeneratorConfig, PipelineGenerator

TEST_DATA_DIR = Path(__file__).parent / "test_data"


def load_test_model(name: str) -> dict:
    """Load a JSON AST model from test_data."""
    with open(TEST_DATA_DIR / name) as f:
        return json.load(f)


@pytest.fixture
def people_model():
    return load_test_model("people.json")


@pytest.fixture
def generate_package(tmp_path, monkeypatch):
    """Return a function generating a model into a fresh importable package."""
    monkeypatch.syspath_prepend(str(tmp_path))

    def generate(model, customizations=None, **options):
        name = f"gen_{uuid.uuid4().hex}"
        config = CodeGeneratorConfig.from_dict(options)
        written = PipelineGenerator(name, model, config, customizations).write(tmp_path)
        package = importlib.import_module(name)
        for path in written:
            if path.stem != "__init__":
                importlib.import_module(f"{name}.{path.stem}")
        return package

    return generate

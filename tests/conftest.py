"""Shared fixtures for the outline editor test-suite."""

import itertools
import logging
from pathlib import Path
import sys

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from outline_editor.config import ConfigManager
from outline_editor.core.catalog import TokenCatalog
from outline_editor.core.document_store import DocumentStore
from outline_editor.core.models import sections_from_payload
from outline_editor.core.services.block_editing_service import BlockEditingService
from outline_editor.core.settings import EditorSettings
from outline_editor.ui.blocks.focus_coordinator import FocusCoordinator
from outline_editor.ui.controllers.editor_controller import EditorController

# Configure test logging
logging.basicConfig(
    level=logging.DEBUG,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

PAPERS = [
    "brown2020gpt3",
    "vaswani2017attention",
    "devlin2018bert",
    "simonyan2014vgg",
    "he2016resnet",
]


def chip(token_id: str) -> str:
    """Canonical chip markup for *token_id*."""
    return f'<span class="inline-item" contenteditable="false">{token_id}</span>'


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point user overrides at an empty directory and drop the cached config."""
    monkeypatch.setenv("OUTLINE_EDITOR_CONFIG_DIR", str(tmp_path / "user_config"))
    ConfigManager.reset()
    yield
    ConfigManager.reset()


@pytest.fixture
def catalog():
    return TokenCatalog(PAPERS)


@pytest.fixture
def settings(catalog):
    return EditorSettings(catalog=catalog)


@pytest.fixture
def service():
    return BlockEditingService()


@pytest.fixture
def sample_payload():
    """Two top-level sections with nested subsections, chips already parsed."""
    return [
        {
            "id": "nlp",
            "name": "Natural Language Processing",
            "content": [
                {"id": "nlp-1", "content": f"Transformers since {chip('vaswani2017attention')} changed NLP."},
            ],
            "subsections": [
                {
                    "id": "bert",
                    "name": "BERT-based Models",
                    "content": [{"id": "bert-1", "content": f"{chip('devlin2018bert')} set a new baseline."}],
                    "subsections": [],
                },
                {
                    "id": "gen",
                    "name": "Generative Language Models",
                    "content": [{"id": "gen-1", "content": f"{chip('brown2020gpt3')} showed few-shot learning."}],
                    "subsections": [],
                },
            ],
        },
        {
            "id": "cv",
            "name": "Computer Vision",
            "content": [{"id": "cv-1", "content": "Deep networks reshaped vision."}],
            "subsections": [
                {
                    "id": "cnn",
                    "name": "CNN Architectures",
                    "content": [
                        {"id": "cnn-1", "content": f"{chip('simonyan2014vgg')} went deeper."},
                        {"id": "cnn-2", "content": f"{chip('he2016resnet')} added residuals."},
                        {"id": "cnn-3", "content": "Later work followed."},
                    ],
                    "subsections": [],
                },
            ],
        },
    ]


@pytest.fixture
def sample_tree(sample_payload):
    return sections_from_payload(sample_payload)


@pytest.fixture
def id_factory():
    """Deterministic id generator: n1, n2, ..."""
    counter = itertools.count(1)
    return lambda: f"n{next(counter)}"


@pytest.fixture
def make_controller(settings, id_factory):
    def factory(payload, schedule=None):
        ctrl = EditorController(
            DocumentStore(sections_from_payload(payload)),
            BlockEditingService(),
            FocusCoordinator(),
            settings,
            new_id=id_factory,
            schedule=schedule,
        )
        ctrl.render()
        return ctrl
    return factory


@pytest.fixture
def chip_markup():
    return chip

"""
Shared fixtures for the test suite.

Provides a scripted in-memory text completion service (`ScriptedAgent`),
a realistic NGLE analysis payload and isolation of factory and metrics state.
"""

import copy
import json
from typing import List, Union

import pytest

from ngle_analyzer.agents.agent_factory import AgentFactory
from ngle_analyzer.agents.base_agent import BaseLLMAgent
from ngle_analyzer.utils.metrics import metrics_tracker


EL_PERRO_PAYLOAD = {
    "fullSentence": "El perro que ladra no muerde",
    "classification": (
        "Oración Compleja, Enunciativa Negativa, Predicativa, Activa, Intransitiva, "
        "con Subordinada Relativa Especificativa"
    ),
    "structure": [
        {
            "text": "El perro que ladra",
            "label": "SN Sujeto",
            "children": [
                {"text": "El", "label": "Det"},
                {"text": "perro", "label": "N (N)"},
                {
                    "text": "que ladra",
                    "label": "Oración - Subordinada Relativa Especificativa",
                    "children": [
                        {"text": "que", "label": "PronRel (Sujeto)"},
                        {
                            "text": "ladra",
                            "label": "SV - Predicado verbal",
                            "children": [{"text": "ladra", "label": "V (N)"}],
                        },
                    ],
                },
            ],
        },
        {
            "text": "no muerde",
            "label": "SV - Predicado verbal",
            "children": [
                {
                    "text": "no",
                    "label": "SAdv - CC de Negación",
                    "children": [{"text": "no", "label": "Adv (N)"}],
                },
                {"text": "muerde", "label": "V (N)"},
            ],
        },
    ],
}


class ScriptedAgent(BaseLLMAgent):
    """
    Agent that replays a script of replies.

    Each script entry is either a string (returned as the reply body) or an
    exception instance (raised). The last entry repeats once the script runs out.
    """

    def __init__(self, script: List[Union[str, BaseException]], provider: str = "scripted"):
        self.script = list(script)
        self.provider = provider
        self.prompts: List[str] = []

    @property
    def calls(self) -> int:
        return len(self.prompts)

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        index = min(len(self.prompts) - 1, len(self.script) - 1)
        item = self.script[index]
        if isinstance(item, BaseException):
            raise item
        return item

    def get_provider_name(self) -> str:
        return self.provider

    def get_model_name(self) -> str:
        return "scripted-model"


@pytest.fixture
def el_perro_payload():
    """A deep copy of the reference analysis for 'El perro que ladra no muerde'."""
    return copy.deepcopy(EL_PERRO_PAYLOAD)


@pytest.fixture
def el_perro_json(el_perro_payload):
    return json.dumps(el_perro_payload, ensure_ascii=False)


@pytest.fixture(autouse=True)
def reset_global_state():
    """Isolates agent factory instances and metrics counters between tests."""
    AgentFactory.reset()
    metrics_tracker.reset()
    yield
    AgentFactory.reset()
    metrics_tracker.reset()


@pytest.fixture
def make_agent():
    """Factory fixture: `make_agent([reply_or_exception, ...])` -> ScriptedAgent."""
    return ScriptedAgent

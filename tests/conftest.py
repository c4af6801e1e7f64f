import base64
import io
import json
from collections import deque
from types import SimpleNamespace

import pytest
from PIL import Image

from leximind.api import AIGateway
from leximind.config import Settings
from leximind.logger import logger
from leximind.store import CollectionStore

logger.enabled = False


def make_png_b64(color=(200, 120, 40)) -> str:
    buffer = io.BytesIO()
    Image.new("RGB", (4, 4), color).save(buffer, format="PNG")
    return base64.b64encode(buffer.getvalue()).decode("ascii")


def completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


DEFINITION_JSON = {
    "word": "gato",
    "phonetic": "/ˈɡa.to/",
    "partOfSpeech": "sustantivo",
    "definition": "Mamífero felino doméstico.",
    "originalDefinition": "Animal doméstico de la familia de los felinos.",
    "examples": ["El gato duerme. (The cat sleeps.)"],
    "synonyms": ["minino", "felino"],
    "etymology": "Del latín tardío cattus.",
    "vibes": ["Everyday, neutral word."],
}


class FakeChatCompletions:
    def __init__(self):
        self.responses = deque()
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if not self.responses:
            raise RuntimeError("no scripted response")
        response = self.responses.popleft()
        if isinstance(response, Exception):
            raise response
        if isinstance(response, (dict, list)):
            response = json.dumps(response)
        return completion(response)


class FakeImages:
    def __init__(self):
        self.b64 = make_png_b64()
        self.calls = []
        self.error = None

    def generate(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(data=[SimpleNamespace(b64_json=self.b64)])


class FakeSpeech:
    def __init__(self):
        self.payload = b"\x00\x00\xff\x7f\x00\x80"
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        return SimpleNamespace(iter_bytes=lambda: iter([self.payload]))


class FakeOpenAI:
    """Just enough of the OpenAI client surface for AIGateway."""

    def __init__(self):
        self.completions = FakeChatCompletions()
        self.chat = SimpleNamespace(completions=self.completions)
        self.images = FakeImages()
        self.speech = FakeSpeech()
        self.audio = SimpleNamespace(speech=self.speech)


class ManualRunner:
    """Queues submitted work; tests decide when (and in what order) it completes."""

    def __init__(self):
        self.pending = []

    def submit(self, name, work, on_done, on_error=None):
        self.pending.append(SimpleNamespace(name=name, work=work, on_done=on_done, on_error=on_error))

    def names(self):
        return [task.name for task in self.pending]

    def _take(self, name):
        for task in self.pending:
            if task.name == name:
                self.pending.remove(task)
                return task
        raise AssertionError(f"no pending task named {name!r} (pending: {self.names()})")

    def resolve(self, name, result=None):
        self._take(name).on_done(result)

    def fail(self, name, error=None):
        task = self._take(name)
        task.on_error(error or RuntimeError("boom"))

    def run(self, name):
        """Actually execute the queued work, then deliver its outcome."""
        task = self._take(name)
        try:
            result = task.work()
        except Exception as e:
            task.on_error(e)
        else:
            task.on_done(result)


@pytest.fixture
def settings(tmp_path):
    return Settings(api_key="sk-test", data_dir=tmp_path / "data")


@pytest.fixture
def fake_client():
    return FakeOpenAI()


@pytest.fixture
def played():
    return []


@pytest.fixture
def gateway(fake_client, settings, played):
    return AIGateway(fake_client, settings, player=lambda samples, rate: played.append((samples, rate)))


@pytest.fixture
def store(settings):
    return CollectionStore(settings.collection_path)


@pytest.fixture
def runner():
    return ManualRunner()

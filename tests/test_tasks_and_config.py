from leximind.config import Settings, create_client, mask_key
from leximind.tasks import ThreadedRunner


def test_runner_dispatches_result():
    dispatched, results = [], []
    runner = ThreadedRunner(dispatched.append)

    runner.submit("add", lambda: 1 + 1, results.append).join(timeout=5)

    assert results == []
    dispatched[0]()
    assert results == [2]


def test_runner_dispatches_error():
    dispatched, errors = [], []
    runner = ThreadedRunner(dispatched.append)

    def explode():
        raise ValueError("bad")

    runner.submit("explode", explode, lambda result: None, errors.append).join(timeout=5)
    dispatched[0]()

    assert isinstance(errors[0], ValueError)


def test_runner_without_error_handler_drops_failure():
    dispatched = []
    runner = ThreadedRunner(dispatched.append)
    runner.submit("explode", lambda: 1 / 0, lambda result: None).join(timeout=5)
    assert dispatched == []


def test_mask_key():
    assert mask_key("sk-abcdefghijklmnop") == "sk-abcde...mnop"
    assert mask_key("short") == "***"


def test_settings_paths(tmp_path):
    settings = Settings(data_dir=tmp_path)
    assert settings.images_dir == tmp_path / "images"
    assert settings.collection_path == tmp_path / "leximind_saved.json"


def test_create_client_without_key():
    assert create_client(Settings(api_key=None)) is None

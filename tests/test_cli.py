from unittest.mock import patch

import pytest

from newsdigest.cli.main import run_once
from newsdigest.fetchers.rss import FeedFetchError
from newsdigest.notifier import NotifyError


@pytest.fixture
def credentials(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv('SLACK_WEBHOOK_URL', 'https://hooks.example/x')
    monkeypatch.setenv('HUGGINGFACE_API_KEY', 'hf_key')


def test_missing_credentials_exit_nonzero(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv('SLACK_WEBHOOK_URL', raising=False)
    monkeypatch.delenv('HUGGINGFACE_API_KEY', raising=False)
    with patch('newsdigest.cli.main.run_digest') as run_digest:
        with pytest.raises(SystemExit) as excinfo:
            run_once()
    assert excinfo.value.code == 1
    run_digest.assert_not_called()


@pytest.mark.parametrize('error', [FeedFetchError('down'), NotifyError('status 403', status_code=403)])
def test_fatal_run_errors_exit_nonzero(credentials, error):
    with patch('newsdigest.cli.main.run_digest', side_effect=error):
        with pytest.raises(SystemExit) as excinfo:
            run_once()
    assert excinfo.value.code == 1


def test_successful_run_returns_normally(credentials):
    with patch('newsdigest.cli.main.run_digest', return_value=2) as run_digest:
        run_once()
    config = run_digest.call_args.args[0]
    assert config.api_key == 'hf_key'

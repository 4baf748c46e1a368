"""
Tests for the centralized message catalogue.
"""

from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
SOURCE_DIRS = ('models', 'blueprints', 'utils', 'database')


def _source_text():
    """All application source except the catalogue itself."""
    paths = [ROOT / 'app.py']
    for directory in SOURCE_DIRS:
        paths.extend(p for p in (ROOT / directory).rglob('*.py') if p.name != 'messages.py')
    return '\n'.join(path.read_text(encoding='utf-8') for path in paths)


class TestMessages:
    """Tests for MESSAGES and get_message."""

    def test_every_message_is_used(self):
        from utils.messages import MESSAGES

        source = _source_text()
        unused = [key for key in MESSAGES if f"'{key}'" not in source]

        assert unused == []

    def test_formats_parameters(self):
        from utils.messages import get_message

        assert get_message('invalid_text', field='admin') == 'admin must be text'
        assert get_message('reservation_created', number='RV260610001') == \
            'Reservation RV260610001 created'

    def test_unknown_key_returns_key(self):
        from utils.messages import get_message

        assert get_message('no_such_message') == 'no_such_message'

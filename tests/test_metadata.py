"""Tests for track metadata."""

import pytest
from unittest.mock import MagicMock, patch

from playersync.exceptions import MetadataError
from playersync.metadata import read_track_from_path


class FakeAudio(dict):
    """Tag mapping with a mutagen-like info attribute."""

    def __init__(self, tags, length):
        super().__init__(tags)
        self.info = MagicMock(length=length)


class TestReadTrackFromPath:
    """Test read_track_from_path."""

    def test_missing_file(self):
        with pytest.raises(MetadataError):
            read_track_from_path('/nonexistent/song.mp3')

    def test_untagged_file_uses_stem(self, sample_audio_file):
        with patch('playersync.metadata.File', return_value=None):
            metadata = read_track_from_path(sample_audio_file)
        assert metadata.title == 'test'
        assert metadata.duration is None

    def test_tags_and_duration(self, sample_audio_file):
        audio = FakeAudio({'TIT2': ['MONTERO'], 'TPE1': ['Lil Nas X'], 'TALB': [b'Montero']}, 137.5)
        with patch('playersync.metadata.File', return_value=audio):
            metadata = read_track_from_path(sample_audio_file)
        assert metadata.title == 'MONTERO'
        assert metadata.artist == 'Lil Nas X'
        assert metadata.album == 'Montero'
        assert metadata.duration == 137.5
        assert metadata.to_dict()['file_path'] == sample_audio_file

    def test_unreadable_file_falls_back(self, sample_audio_file):
        with patch('playersync.metadata.File', side_effect=OSError("denied")):
            metadata = read_track_from_path(sample_audio_file)
        assert metadata.title == 'test'

"""Track metadata extraction using mutagen."""

from pathlib import Path
from typing import Any, Dict, List, Optional

from mutagen import File, MutagenError
from mutagen.flac import FLAC
from mutagen.oggvorbis import OggVorbis

from playersync.exceptions import MetadataError
from playersync.logging import get_logger

logger = get_logger(__name__)

TITLE_KEYS = [
    'TITLE',      # FLAC, OGG (Vorbis)
    'TIT2',       # MP3 (ID3v2)
    '\xa9nam',    # MP4 (iTunes)
]
ARTIST_KEYS = [
    'ARTIST',     # FLAC, OGG (Vorbis)
    'TPE1',       # MP3 (ID3v2)
    '\xa9ART',    # MP4 (iTunes)
]
ALBUM_KEYS = [
    'ALBUM',      # FLAC, OGG (Vorbis)
    'TALB',       # MP3 (ID3v2)
    '\xa9alb',    # MP4 (iTunes)
]


class TrackMetadata:
    """Display metadata for a single audio file."""

    def __init__(self, file_path: str):
        self.file_path = file_path
        self.title: Optional[str] = None
        self.artist: Optional[str] = None
        self.album: Optional[str] = None
        self.duration: Optional[float] = None

        self._extract_metadata()

    def _extract_metadata(self) -> None:
        try:
            audio_file = File(self.file_path)
            if audio_file is None:
                return

            self.title = self._get_tag_generic(audio_file, TITLE_KEYS)
            self.artist = self._get_tag_generic(audio_file, ARTIST_KEYS)
            self.album = self._get_tag_generic(audio_file, ALBUM_KEYS)

            if hasattr(audio_file, 'info') and hasattr(audio_file.info, 'length'):
                self.duration = audio_file.info.length
        except (MutagenError, OSError) as e:
            logger.warning("Error extracting metadata from %s: %s", self.file_path, e)
        finally:
            # Always have a sensible title, even if mutagen failed to parse tags
            if not self.title:
                self.title = Path(self.file_path).stem

    def _get_tag_generic(self, audio_file, tag_keys: List[str]) -> Optional[str]:
        """Get a tag value trying multiple possible keys - works for all formats."""
        for key in tag_keys:
            try:
                value = None
                # Vorbis comments live on .tags; ID3 and MP4 frames are indexable on the file
                if isinstance(audio_file, (FLAC, OggVorbis)):
                    if audio_file.tags is not None and key in audio_file.tags:
                        value = audio_file.tags[key]
                elif key in audio_file:
                    value = audio_file[key]

                if value is None:
                    continue
                if isinstance(value, (list, tuple)):
                    if not value:
                        continue
                    value = value[0]
                if isinstance(value, bytes):
                    value = value.decode('utf-8', errors='ignore')

                result = str(value).strip()
                if result:
                    return result
            except (KeyError, AttributeError, TypeError, ValueError):
                continue
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'file_path': self.file_path,
            'title': self.title,
            'artist': self.artist,
            'album': self.album,
            'duration': self.duration,
        }


def read_track_from_path(file_path: str) -> TrackMetadata:
    """
    Read display metadata for a track file.

    Args:
        file_path: Path to the audio file

    Returns:
        TrackMetadata with at least a title (the file stem when untagged)

    Raises:
        MetadataError: if the file does not exist
    """
    if not Path(file_path).is_file():
        raise MetadataError("Track file not found: %s" % file_path)
    return TrackMetadata(file_path)

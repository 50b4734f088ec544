"""
storage.py
Local JSON persistence for users, saved reports and rating feedback.

Layout under the storage directory:
    users.json       registered profiles (password stored as SHA-256 hex)
    analyses.json    report records with a monotonic id counter
    learning.json    sensitivity bias adjusted by user ratings
    media/           raw uploads, stored independently of the records
"""

import hashlib
import json
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from kinetics.errors import DuplicateIdentity, PersistenceQuotaExceeded
from kinetics.models import AnalysisReport


ROLES = ('Athlete', 'Coach')
DEFAULT_MEDIA_BUDGET = 50 * 1024 ** 2


def hash_password(password: str) -> str:
    return hashlib.sha256(password.encode('utf-8')).hexdigest()


class ReportStore:
    """File-backed store keyed by user id and record id."""

    def __init__(self, base_dir="outputs", media_budget_bytes: int = DEFAULT_MEDIA_BUDGET):
        self.base_dir = Path(base_dir)
        self.media_budget_bytes = media_budget_bytes
        self.users_file = self.base_dir / 'users.json'
        self.analyses_file = self.base_dir / 'analyses.json'
        self.learning_file = self.base_dir / 'learning.json'
        self.media_dir = self.base_dir / 'media'

    # ------------------------------------------------------------------
    # File helpers
    # ------------------------------------------------------------------

    def _load(self, path: Path, default):
        if not path.exists():
            return default
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            # Corrupted file: keep a copy aside and start fresh rather than break the app
            backup = path.with_name(path.name + '.corrupt')
            print(f"  [WARNING] Could not parse {path.name}, moving it to {backup.name}: {e}")
            try:
                os.replace(path, backup)
            except OSError as move_error:
                print(f"  [WARNING] Could not move {path.name} aside: {move_error}")
            return default

    def _write(self, path: Path, payload) -> None:
        """Write JSON through a temp file so a failed dump leaves the old file intact."""
        self.base_dir.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.base_dir, prefix=f".{path.name}.", suffix='.tmp')
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                json.dump(payload, f, indent=2)
            os.replace(tmp_name, path)
        finally:
            Path(tmp_name).unlink(missing_ok=True)

    def _media_ids(self) -> List[int]:
        if not self.media_dir.exists():
            return []
        return [int(p.stem) for p in self.media_dir.iterdir() if p.stem.isdigit()]

    def _load_analyses(self) -> dict:
        data = self._load(self.analyses_file, {'next_id': 1, 'records': []})
        # Ids never go backwards, even if the index had to be reset
        used = [r['id'] for r in data['records']] + self._media_ids()
        data['next_id'] = max(data.get('next_id', 1), max(used, default=0) + 1)
        return data

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def register_user(self, username: str, password: str, role: str = 'Athlete') -> dict:
        """
        Create a profile.

        Raises:
            DuplicateIdentity: If the username is taken
            ValueError: On empty username/password or unknown role
        """
        username = (username or '').strip()
        if not username or not password:
            raise ValueError("Username and password are required")
        if role not in ROLES:
            raise ValueError(f"Role must be one of {', '.join(ROLES)}")

        data = self._load(self.users_file, {'next_id': 1, 'users': []})
        if any(u['username'].lower() == username.lower() for u in data['users']):
            raise DuplicateIdentity(f"Username exists: {username}")

        now = datetime.now().isoformat()
        user = {
            'id': data['next_id'],
            'username': username,
            'password_hash': hash_password(password),
            'role': role,
            'created': now,
            'last_login': now,
        }
        data['users'].append(user)
        data['next_id'] += 1
        self._write(self.users_file, data)

        print(f"[STORAGE] Registered user #{user['id']} ({username})")
        return user

    def login_user(self, username: str, password: str) -> Optional[dict]:
        """Return the profile on a matching password, else None."""
        data = self._load(self.users_file, {'next_id': 1, 'users': []})
        candidate = hash_password(password or '')

        for user in data['users']:
            if user['username'] == username and user['password_hash'] == candidate:
                user['last_login'] = datetime.now().isoformat()
                self._write(self.users_file, data)
                return user

        return None

    def list_users(self) -> List[dict]:
        return self._load(self.users_file, {'next_id': 1, 'users': []})['users']

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    def _store_media(self, record_id: int, media: bytes, suffix: str) -> str:
        if len(media) > self.media_budget_bytes:
            raise PersistenceQuotaExceeded(
                f"Media payload {len(media)} bytes exceeds budget of {self.media_budget_bytes}"
            )
        try:
            self.media_dir.mkdir(parents=True, exist_ok=True)
            media_path = self.media_dir / f"{record_id}{suffix}"
            media_path.write_bytes(media)
        except OSError as e:
            raise PersistenceQuotaExceeded(f"Could not store media: {e}") from e
        return str(media_path.relative_to(self.base_dir))

    def save_analysis(self, user_id: int, report: AnalysisReport,
                      media: bytes = None, media_suffix: str = '.mp4') -> int:
        """
        Persist a report, optionally with the uploaded video.

        The media payload is stored independently: if it does not fit, the
        record is committed without it.

        Returns:
            The new record id

        Raises:
            PersistenceQuotaExceeded: If even the metadata cannot be written
        """
        data = self._load_analyses()
        record_id = data['next_id']

        record = {
            'id': record_id,
            'user_id': user_id,
            'date': datetime.now().isoformat(),
            'data': report.to_dict(),
            'media_path': None,
            'user_rating': None,
            'user_feedback': None,
        }

        if media is not None:
            try:
                record['media_path'] = self._store_media(record_id, media, media_suffix)
            except PersistenceQuotaExceeded as e:
                print(f"  [WARNING] Storage quota exceeded, saving metadata only: {e}")

        data['records'].append(record)
        data['next_id'] = record_id + 1

        try:
            self._write(self.analyses_file, data)
        except OSError as e:
            if record['media_path']:
                (self.base_dir / record['media_path']).unlink(missing_ok=True)
            raise PersistenceQuotaExceeded(f"Error saving analysis: {e}") from e

        print(f"[STORAGE] Saved record #{record_id} for user {user_id}")
        return record_id

    def get_analysis(self, record_id: int) -> Optional[dict]:
        for record in self._load_analyses()['records']:
            if record['id'] == record_id:
                return record
        return None

    def get_user_analyses(self, user_id: int) -> List[dict]:
        """All records for a user, newest first."""
        records = [r for r in self._load_analyses()['records'] if r['user_id'] == user_id]
        return sorted(records, key=lambda r: (r['date'], r['id']), reverse=True)

    def load_report(self, record: dict) -> AnalysisReport:
        return AnalysisReport.from_dict(record['data'])

    def media_path(self, record: dict) -> Optional[Path]:
        if not record.get('media_path'):
            return None
        path = self.base_dir / record['media_path']
        return path if path.exists() else None

    def delete_analysis(self, record_id: int) -> bool:
        data = self._load_analyses()
        remaining = [r for r in data['records'] if r['id'] != record_id]
        if len(remaining) == len(data['records']):
            return False

        removed = next(r for r in data['records'] if r['id'] == record_id)
        if removed.get('media_path'):
            (self.base_dir / removed['media_path']).unlink(missing_ok=True)

        data['records'] = remaining
        self._write(self.analyses_file, data)
        return True

    # ------------------------------------------------------------------
    # Feedback
    # ------------------------------------------------------------------

    def update_rating(self, record_id: int, rating: int, feedback: str = "") -> bool:
        """
        Attach a 1-5 star rating and feedback text to a record.

        The report body is left untouched. Ratings below 3 push the
        sensitivity bias to "high", anything else resets it to "balanced".

        Returns:
            True if the record exists, False otherwise
        """
        if not isinstance(rating, int) or not 1 <= rating <= 5:
            raise ValueError(f"Rating must be an integer 1-5, got {rating!r}")

        data = self._load_analyses()
        record = next((r for r in data['records'] if r['id'] == record_id), None)
        if record is None:
            return False

        record['user_rating'] = rating
        record['user_feedback'] = feedback
        self._write(self.analyses_file, data)

        learning = self._load(self.learning_file, {})
        if rating < 3:
            learning['last_negative_feedback'] = {
                'record_id': record_id,
                'timestamp': datetime.now().isoformat(),
                'notes': feedback,
            }
            learning['sensitivity_bias'] = 'high'
        else:
            learning['sensitivity_bias'] = 'balanced'
        self._write(self.learning_file, learning)

        return True

    def get_sensitivity_bias(self) -> str:
        return self._load(self.learning_file, {}).get('sensitivity_bias', 'balanced')

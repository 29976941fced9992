"""
Tests for the go-librespot source - status parsing, REST client, event routing.
"""
import json
import logging
import threading
import pytest
import requests
from pathlib import Path
from unittest.mock import MagicMock

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from scrollmpris.api.librespot import LibrespotAPI, parse_status
from scrollmpris.handlers.events import EventListener
from scrollmpris.handlers.librespot import LibrespotSource
from scrollmpris.models import TrackMetadata


@pytest.fixture
def sample_status():
    """A /status response while playing."""
    return {
        'stopped': False,
        'paused': False,
        'volume': 60,
        'track': {
            'uri': 'spotify:track:abc',
            'name': 'Song',
            'artist_names': ['Artist', 'Guest'],
            'album_name': 'Album',
            'position': 65000,
            'duration': 200000,
        },
    }


class TestParseStatus:
    """Mapping /status JSON onto playback fields."""

    def test_playing(self, sample_status):
        meta, position, status = parse_status(sample_status)
        assert meta == TrackMetadata('Song', 'Artist, Guest', 'Album', 200.0)
        assert position == 65.0
        assert status == 'Playing'

    def test_paused(self, sample_status):
        sample_status['paused'] = True
        assert parse_status(sample_status)[2] == 'Paused'

    def test_stopped(self, sample_status):
        sample_status['stopped'] = True
        assert parse_status(sample_status)[2] == 'Stopped'

    def test_no_status(self):
        assert parse_status(None) is None

    def test_no_track(self):
        assert parse_status({'stopped': True, 'track': None}) is None
        assert parse_status({'stopped': False, 'track': 'bogus'}) is None

    def test_unknown_duration(self, sample_status):
        sample_status['track']['duration'] = 0
        assert parse_status(sample_status)[0].length is None

    def test_missing_optional_fields(self, sample_status):
        del sample_status['track']['artist_names']
        del sample_status['track']['album_name']
        del sample_status['track']['position']
        meta, position, _ = parse_status(sample_status)
        assert meta.artist == ''
        assert meta.album == ''
        assert position == 0.0


class TestLibrespotAPI:
    """REST client error handling."""

    @pytest.fixture
    def api(self):
        api = LibrespotAPI('http://localhost:3678')
        api.session = MagicMock()
        return api

    def test_status_ok(self, api, sample_status):
        resp = MagicMock(status_code=200)
        resp.json.return_value = sample_status
        api.session.get.return_value = resp
        assert api.status() == sample_status
        api.session.get.assert_called_once_with('http://localhost:3678/status', timeout=2)

    def test_status_no_content(self, api):
        api.session.get.return_value = MagicMock(status_code=204)
        assert api.status() is None

    def test_status_unreachable(self, api):
        api.session.get.side_effect = requests.ConnectionError('refused')
        assert api.status() is None

    def test_status_bad_json(self, api):
        resp = MagicMock(status_code=200)
        resp.json.side_effect = ValueError('not json')
        api.session.get.return_value = resp
        assert api.status() is None

    def test_is_reachable(self, api):
        """Any HTTP answer counts, even an error status."""
        api.session.get.return_value = MagicMock(status_code=500)
        assert api.is_reachable()
        api.session.get.side_effect = requests.ConnectionError('refused')
        assert not api.is_reachable()


class TestEventRouting:
    """WebSocket messages trigger a seek or a refresh."""

    @pytest.fixture
    def handlers(self):
        return MagicMock(), MagicMock()

    @pytest.fixture
    def events(self, handlers):
        on_update, on_seek = handlers
        return EventListener('ws://localhost:3678/events', on_update, on_seek=on_seek)

    def test_seek_event(self, events, handlers):
        on_update, on_seek = handlers
        events._on_message(None, json.dumps({'type': 'seek', 'data': {'position': 12500}}))
        on_seek.assert_called_once_with(12.5)
        on_update.assert_not_called()

    def test_other_events_refresh(self, events, handlers):
        on_update, on_seek = handlers
        for event_type in ('playing', 'paused', 'metadata', 'stopped'):
            events._on_message(None, json.dumps({'type': event_type, 'data': {}}))
        assert on_update.call_count == 4
        on_seek.assert_not_called()

    def test_seek_without_position_refreshes(self, events, handlers):
        on_update, on_seek = handlers
        events._on_message(None, json.dumps({'type': 'seek'}))
        on_update.assert_called_once_with()
        on_seek.assert_not_called()

    def test_invalid_json_ignored(self, events, handlers):
        on_update, on_seek = handlers
        events._on_message(None, '{not json')
        events._on_message(None, '[1, 2]')
        on_update.assert_not_called()
        on_seek.assert_not_called()

    def test_open_resyncs(self, handlers):
        on_connect = MagicMock()
        events = EventListener('ws://x', handlers[0], on_connect=on_connect)
        events._on_open(None)
        on_connect.assert_called_once_with()


class TestLibrespotSource:
    """Status refresh feeds the app callbacks."""

    @pytest.fixture
    def source(self):
        api = MagicMock()
        return LibrespotSource(
            api, 'ws://localhost:3678/events',
            on_metadata=MagicMock(), on_seek=MagicMock(), on_player_lost=MagicMock(),
            listener=MagicMock(),
        )

    def test_refresh_reports_track(self, source, sample_status):
        source.api.status.return_value = sample_status
        source.refresh()
        source.on_metadata.assert_called_once_with(
            TrackMetadata('Song', 'Artist, Guest', 'Album', 200.0), 65.0, 'Playing', 'librespot'
        )

    def test_refresh_without_track(self, source):
        source.api.status.return_value = None
        source.refresh()
        source.on_player_lost.assert_called_once_with()
        source.on_metadata.assert_not_called()

    def test_stop_closes_listener(self, source):
        source.stop()
        source.events.stop.assert_called_once_with()

    def test_default_listener_wiring(self):
        """WebSocket callbacks only enqueue work."""
        source = LibrespotSource(MagicMock(), 'ws://localhost:3678/events',
                                 on_metadata=MagicMock(), on_seek=MagicMock(),
                                 on_player_lost=MagicMock())
        assert source.events.url == 'ws://localhost:3678/events'
        assert source.events.on_seek == source.queue_seek
        assert source.events.on_update == source.request_refresh

    def test_update_does_not_block_caller(self, source):
        """Requesting a refresh from the socket thread makes no HTTP call."""
        source.request_refresh()
        source.api.status.assert_not_called()


class TestLibrespotWorker:
    """Refreshes and seeks run on one worker thread, in arrival order."""

    @pytest.fixture
    def calls(self):
        return []

    @pytest.fixture
    def source(self, calls, sample_status):
        api = MagicMock()
        api.status.return_value = sample_status
        done = threading.Event()

        def on_seek(position):
            calls.append(('seek', position))
            if position == 99.0:
                done.set()

        source = LibrespotSource(
            api, 'ws://localhost:3678/events',
            on_metadata=lambda meta, position, status, service: calls.append(('metadata', position)),
            on_seek=on_seek,
            on_player_lost=MagicMock(),
            listener=MagicMock(),
        )
        source.done = done
        yield source
        source.stop()

    def test_jobs_run_in_order(self, source, calls):
        source.start()
        source.queue_seek(12.5)
        source.request_refresh()
        source.queue_seek(99.0)
        assert source.done.wait(timeout=2)
        assert calls == [('metadata', 65.0), ('seek', 12.5), ('metadata', 65.0), ('seek', 99.0)]
        source.events.start.assert_called_once_with()

    def test_failed_job_keeps_worker_alive(self, source, calls):
        source.api.status.side_effect = [RuntimeError('boom'), None]
        source.start()
        source.queue_seek(99.0)
        assert source.done.wait(timeout=2)
        assert calls == [('seek', 99.0)]

    def test_unreachable_at_startup_is_logged(self, source, caplog):
        source.api.is_reachable.return_value = False
        with caplog.at_level(logging.WARNING):
            source.start()
            source.queue_seek(99.0)
            assert source.done.wait(timeout=2)
        assert 'not reachable' in caplog.text

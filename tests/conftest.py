import pytest

from config import EditorConfig
from editor import MapEditor


class FakeCanvas:
    """Records drawing calls the way a Tk canvas would receive them."""

    def __init__(self, width=800, height=600):
        self.width = width
        self.height = height
        self.items = []
        self.deleted = 0

    def winfo_width(self):
        return self.width

    def winfo_height(self):
        return self.height

    def delete(self, tag):
        self.deleted += 1
        self.items = []

    def create_line(self, *coords, **kwargs):
        self.items.append(('line', coords, kwargs))

    def create_oval(self, *coords, **kwargs):
        self.items.append(('oval', coords, kwargs))

    def create_text(self, *coords, **kwargs):
        self.items.append(('text', coords, kwargs))

    def tagged(self, tag, kind=None):
        return [item for item in self.items
                if item[2].get('tags') == tag and (kind is None or item[0] == kind)]


class FakeSocketApp:
    """Stands in for websocket.WebSocketApp."""

    def __init__(self, url, on_open=None, on_message=None, on_error=None, on_close=None):
        self.url = url
        self.on_open = on_open
        self.on_message = on_message
        self.on_error = on_error
        self.on_close = on_close
        self.sent = []
        self.closed = False
        self.runs = 0

    def send(self, text):
        self.sent.append(text)

    def close(self):
        self.closed = True

    def run_forever(self):
        self.runs += 1


class FakeChannel:
    """Channel double that records requests and hands back queued paths."""

    def __init__(self, connected=True):
        self.connected = connected
        self.requests = []
        self.paths = []

    def send_solve_request(self, matrix, params=None):
        self.requests.append((matrix, params))
        return self.connected

    def poll(self):
        paths, self.paths = self.paths, []
        return paths


class RedrawCounter:
    def __init__(self):
        self.count = 0

    def __call__(self, state):
        self.count += 1


@pytest.fixture
def config():
    return EditorConfig()


@pytest.fixture
def redraws():
    return RedrawCounter()


@pytest.fixture
def channel():
    return FakeChannel()


@pytest.fixture
def editor(config, channel, redraws):
    return MapEditor(config, channel=channel, on_redraw=redraws)


@pytest.fixture
def canvas():
    return FakeCanvas()

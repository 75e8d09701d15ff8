"""
Pytest fixtures for the plaquinhas tests.
"""

import zipfile
from urllib.parse import urlsplit

import pytest

from config import Config
from database import Database

CONTENT_TYPES = '''<?xml version="1.0" encoding="UTF-8"?>
<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">
  <Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>
  <Default Extension="xml" ContentType="application/xml"/>
  <Override PartName="/word/document.xml" ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"/>
</Types>'''

RELS = '''<?xml version="1.0" encoding="UTF-8"?>
<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">
  <Relationship Id="rId1" Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument" Target="word/document.xml"/>
</Relationships>'''

DOC_RELS = '''<?xml version="1.0" encoding="UTF-8"?>
<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">
</Relationships>'''


def document_xml(*paragraphs):
    """Wrap paragraph bodies (run XML) into a word/document.xml"""
    body = ''.join(f'<w:p>{p}</w:p>' for p in paragraphs)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<w:document xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main"'
        ' xmlns:v="urn:schemas-microsoft-com:vml">'
        f'<w:body>{body}</w:body></w:document>'
    )


def run(text):
    return f'<w:r><w:t xml:space="preserve">{text}</w:t></w:r>'


def write_docx(path, xml_content):
    """Minimal .docx archive around the given document.xml"""
    with zipfile.ZipFile(path, 'w', zipfile.ZIP_DEFLATED) as zf:
        zf.writestr('[Content_Types].xml', CONTENT_TYPES)
        zf.writestr('_rels/.rels', RELS)
        zf.writestr('word/_rels/document.xml.rels', DOC_RELS)
        zf.writestr('word/document.xml', xml_content)
    return path


@pytest.fixture
def make_xml():
    """Factory: run texts (one paragraph each) -> document.xml"""
    def _make(*texts):
        return document_xml(*(run(text) for text in texts))

    return _make


@pytest.fixture
def sample_mustache_xml():
    return document_xml(run('ITEM {{ITEM}}'), run('{{ VALOR }}'))


@pytest.fixture
def sample_guillemet_xml():
    return document_xml(run('ITEM «ITEM»'), run('«VALOR»'))


@pytest.fixture
def sample_plain_xml():
    return document_xml(run('Plaquinha sem campos'))


@pytest.fixture
def split_runs_xml():
    """Every placeholder broken over two runs, as Word saves edited text"""
    return document_xml(
        '<w:r><w:t>ITEM {{IT</w:t></w:r><w:r><w:t>EM}}</w:t></w:r>',
        '<w:r><w:t>{{VAL</w:t></w:r><w:r><w:t>OR}}</w:t></w:r>',
    )


@pytest.fixture
def textbox_xml():
    """Anchor paragraph 'Label' holding a text box with two paragraphs"""
    value_run = run('{{VALOR}}')
    text_box = (
        '<w:r><w:pict><v:shape><v:textbox><w:txbxContent>'
        '<w:p><w:r><w:t>{{IT</w:t></w:r><w:r><w:t>EM}}</w:t></w:r></w:p>'
        f'<w:p>{value_run}</w:p>'
        '</w:txbxContent></v:textbox></v:shape></w:pict></w:r>'
    )
    return document_xml(run('Label') + text_box)



@pytest.fixture
def temp_docx(tmp_path):
    """Factory: document.xml content -> path of a .docx holding it"""
    def _create_docx(xml_content, name='test_template.docx'):
        return write_docx(tmp_path / name, xml_content)

    return _create_docx


@pytest.fixture
def templates_dir(tmp_path):
    """Both presets, mustache style"""
    directory = tmp_path / 'modelo_placas'
    directory.mkdir()
    for model in ('wellington', 'patricia'):
        write_docx(directory / f'{model}.docx', document_xml(run(model), run('ITEM {{ITEM}}'), run('{{VALOR}}')))
    return directory


@pytest.fixture
def config(tmp_path, templates_dir):
    return Config(
        port=4000,
        jwt_secret='test-secret',
        database_url='',
        db_path=str(tmp_path / 'users.db'),
        admin_email='admin@example.com',
        gotenberg_url='',
        templates_dir=str(templates_dir),
    )


@pytest.fixture
def database(config):
    db = Database.from_config(config)
    db.init_database()
    return db


@pytest.fixture
def app(config, database):
    from app import create_app

    flask_app = create_app(config, database)
    flask_app.config['TESTING'] = True
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()


class WrappedResponse:
    """The parts of requests.Response the API client reads"""

    def __init__(self, response):
        self.status_code = response.status_code
        self.ok = response.status_code < 400
        self.content = response.data
        self._response = response

    def json(self):
        data = self._response.get_json(silent=True)
        if data is None:
            raise ValueError('not json')
        return data


class FlaskSession:
    """requests.Session stand-in that forwards to a Flask test client"""

    def __init__(self, client):
        self.client = client
        self.timeouts = []

    def get(self, url, headers=None, timeout=None):
        self.timeouts.append(timeout)
        return WrappedResponse(self.client.get(urlsplit(url).path, headers=headers))

    def post(self, url, json=None, timeout=None):
        self.timeouts.append(timeout)
        return WrappedResponse(self.client.post(urlsplit(url).path, json=json))


@pytest.fixture
def flask_session(client):
    return FlaskSession(client)

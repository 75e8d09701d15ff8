#!/usr/bin/env python3
"""
Plaquinhas - Web Interface
Flask app: parse pasted tables, render price tag cards and export them as
DOCX/PDF, plus the account endpoints and the admin login history.
"""

from flask import Flask, render_template, request, send_file, jsonify
from werkzeug.utils import secure_filename
import io
import logging
import re
import time

from account_service import AccountService
from card_renderer import render_table_preview
from config import Config
from database import Database
from document_generator import (
    DOCX_MIMETYPE,
    PDF_MIMETYPE,
    MODEL_LABELS,
    attachment_filename,
    generate_docx,
)
from errors import InvalidInput, PlaquinhasError
from pdf_converter import PdfConverterChain, ensure_libreoffice_on_path, has_gotenberg, has_libreoffice
from security import bearer_token
from table_parser import parse_summary
from workspace_state import WorkspaceState

logger = logging.getLogger(__name__)

# Development origins allowed to call the API from another port
ALLOWED_ORIGINS = [
    re.compile(r'^http://localhost:\d+$'),
    re.compile(r'^http://127\.0\.0\.1:\d+$'),
]


def _json_body() -> dict:
    """JSON object body; anything else (missing, malformed, a list) reads as empty"""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _present(value) -> bool:
    return value is not None and str(value).strip() != ''


def create_app(config: Config = None, database: Database = None) -> Flask:
    """
    Create and configure the Flask application

    Args:
        config: Settings (default: read from the environment)
        database: Storage (default: built from config)
    """
    config = config or Config.from_env()
    database = database or Database.from_config(config)
    database.init_database()
    ensure_libreoffice_on_path()

    app = Flask(__name__)
    app.config['MAX_CONTENT_LENGTH'] = 1 * 1024 * 1024
    app.config['PLAQUINHAS'] = config

    accounts = AccountService(database, config.jwt_secret, config.admin_email)
    converter = PdfConverterChain.from_config(config)

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get('Origin')
        if origin and any(pattern.match(origin) for pattern in ALLOWED_ORIGINS):
            response.headers['Access-Control-Allow-Origin'] = origin
            response.headers['Access-Control-Allow-Credentials'] = 'true'
            response.headers['Access-Control-Allow-Headers'] = 'Content-Type, Authorization'
            response.headers['Vary'] = 'Origin'
        return response

    @app.errorhandler(PlaquinhasError)
    def handle_plaquinhas_error(e):
        return jsonify(e.to_dict()), e.status_code

    # Pages

    @app.route('/', methods=['GET', 'POST'])
    def index():
        """Workspace page: paste text, preview rows, render cards"""
        state = WorkspaceState()
        text = request.form.get('texto', '')
        error = None

        if request.method == 'POST' and request.form.get('action') == 'clear':
            state.clear()
            text = ''
        elif request.method == 'POST':
            state.parse(text)
            model = request.form.get('modelo') or None
            try:
                if model:
                    state.select_model(model)
                if request.form.get('action') == 'generate' and state.can_generate:
                    state.generate_cards()
            except InvalidInput as e:
                error = e.message

        return render_template(
            'index.html',
            state=state,
            rows=render_table_preview(state.items),
            models=MODEL_LABELS,
            error=error,
            text=text,
        )

    # API

    @app.route('/api/health')
    def health():
        return jsonify({
            'ok': True,
            'ts': int(time.time() * 1000),
            'localConverterAvailable': has_libreoffice(),
            'externalServiceAvailable': has_gotenberg(config.gotenberg_url),
        })

    @app.route('/api/parse', methods=['POST'])
    def parse():
        """Parse pasted text into items"""
        data = _json_body()
        text = data.get('text')
        if text is None:
            return jsonify({'error': 'Dados inválidos'}), 400

        state = WorkspaceState()
        items = state.parse(str(text))
        return jsonify({
            'ok': True,
            'count': len(items),
            'items': [item.to_dict() for item in items],
            'hint': parse_summary(items),
        })

    @app.route('/api/register', methods=['POST'])
    def register():
        data = _json_body()
        try:
            accounts.register(
                data.get('email'),
                data.get('password'),
                data.get('firstName'),
                data.get('lastName'),
            )
            return jsonify({'ok': True})
        except PlaquinhasError:
            raise
        except Exception:
            logger.exception("Register failed")
            return jsonify({'error': 'Erro ao cadastrar'}), 500

    @app.route('/api/login', methods=['POST'])
    def login():
        data = _json_body()
        try:
            result = accounts.login(data.get('email'), data.get('password'))
            return jsonify({'ok': True, 'token': result['token'], 'email': result['email']})
        except PlaquinhasError:
            raise
        except Exception:
            logger.exception("Login failed")
            return jsonify({'error': 'Erro no servidor'}), 500

    @app.route('/api/reset-password', methods=['POST'])
    def reset_password():
        data = _json_body()
        try:
            accounts.reset_password(data.get('email'), data.get('newPassword'))
            return jsonify({'ok': True})
        except PlaquinhasError:
            raise
        except Exception:
            logger.exception("Password reset failed")
            return jsonify({'error': 'Erro ao resetar senha'}), 500

    @app.route('/api/admin/logins')
    def admin_logins():
        token = bearer_token(request.headers.get('Authorization'))
        try:
            entries = accounts.list_recent_logins(token)
            return jsonify({'ok': True, 'entries': entries})
        except PlaquinhasError:
            raise
        except Exception:
            logger.exception("Listing logins failed")
            return jsonify({'error': 'Erro ao listar'}), 500

    def _generation_request():
        data = _json_body()
        model, item, valor = data.get('model'), data.get('item'), data.get('valor')
        if not (_present(model) and _present(item) and _present(valor)):
            raise InvalidInput('Parâmetros inválidos')
        return str(model).strip().lower(), str(item).strip(), str(valor)

    def _attachment(content: bytes, model: str, item: str, ext: str, mimetype: str):
        filename = secure_filename(attachment_filename(model, item, ext)) or f"plaquinha.{ext}"
        return send_file(
            io.BytesIO(content),
            as_attachment=True,
            download_name=filename,
            mimetype=mimetype
        )

    @app.route('/api/generate/docx', methods=['POST'])
    def generate_docx_file():
        model, item, valor = _generation_request()
        try:
            content = generate_docx(model, item, valor, config.templates_dir)
            return _attachment(content, model, item, 'docx', DOCX_MIMETYPE)
        except PlaquinhasError:
            raise
        except Exception:
            logger.exception("DOCX generation failed")
            return jsonify({'error': 'Falha ao gerar DOCX'}), 500

    @app.route('/api/generate/pdf', methods=['POST'])
    def generate_pdf_file():
        model, item, valor = _generation_request()
        try:
            docx_bytes = generate_docx(model, item, valor, config.templates_dir)
            content = converter.convert(docx_bytes)
            return _attachment(content, model, item, 'pdf', PDF_MIMETYPE)
        except PlaquinhasError:
            raise
        except Exception:
            logger.exception("PDF generation failed")
            return jsonify({'error': 'Falha ao gerar PDF'}), 500

    return app


if __name__ == '__main__':
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    settings = Config.from_env()
    create_app(settings).run(host='127.0.0.1', port=settings.port)

#!/usr/bin/env python3
"""
Plaquinhas - Command Line Interface
Parse pasted tables, build templates, run the server, export in bulk and
manage accounts through a running server
"""

import argparse
import getpass
import logging
import signal
import sys
from pathlib import Path

from api_client import ApiClient, ApiError
from batch_exporter import ARCHIVE_NAMES, BatchExporter
from config import Config
from document_generator import TEMPLATE_PRESETS
from table_parser import TableTextParser, parse_summary
from workspace_state import WorkspaceState


DEFAULT_SERVER = 'http://localhost:4000'


def read_text(source: str) -> str:
    if source == '-':
        return sys.stdin.read()
    return Path(source).read_text(encoding='utf-8')


def parse_command(args):
    parser = TableTextParser()
    items = parser.parse(read_text(args.file))

    for item in items:
        print(f"{item.item_number:>5}  {item.display_value}")
    print(f"\n{parse_summary(items)}")
    if args.verbose and parser.skipped_lines:
        print(f"Linhas ignoradas: {len(parser.skipped_lines)}")
        for line in parser.skipped_lines:
            print(f"   - {line}")


def serve_command(args):
    from app import create_app

    config = Config.from_env()
    port = args.port or config.port
    print("=" * 60)
    print("Plaquinhas - Web Interface")
    print("=" * 60)
    print(f"\nAPI listening on http://localhost:{port}")
    create_app(config).run(host=args.host, port=port)


def health_command(args):
    client = ApiClient(args.server)
    try:
        status = client.health()
    except Exception as e:
        print(f"✗ Server unreachable: {e}")
        sys.exit(1)

    print(f"✓ Server OK ({args.server})")
    print(f"   LibreOffice local: {'sim' if status.get('localConverterAvailable') else 'não'}")
    print(f"   Gotenberg:         {'sim' if status.get('externalServiceAvailable') else 'não'}")


def run_export(exporter: BatchExporter, items, model: str, fmt: str, progress=None):
    """
    Run an export with Ctrl-C wired to the exporter's cancel flag

    The current item finishes, then the export stops and returns None.
    """
    def request_cancel(signum, frame):
        print("\nCancelando após o item atual...", flush=True)
        exporter.cancel()

    previous = signal.signal(signal.SIGINT, request_cancel)
    try:
        return exporter.export(items, model, fmt, progress=progress)
    finally:
        signal.signal(signal.SIGINT, previous)


def export_command(args):
    items = TableTextParser().parse(read_text(args.file))
    if not items:
        print(parse_summary(items))
        sys.exit(1)

    output = Path(args.output or ARCHIVE_NAMES[args.format])
    exporter = BatchExporter(ApiClient(args.server))
    label = f"Gerando {args.format.upper()} em lote"

    def report(done, total, percent):
        print(f"\r{label} — {percent:.0f}% ({done}/{total})", end='', flush=True)

    try:
        content = run_export(exporter, items, args.model, args.format, progress=report)
    except ApiError as e:
        print(f"\n✗ Falha ao gerar ZIP {args.format.upper()}: {e}")
        sys.exit(1)

    print()
    if content is None:
        print("Exportação cancelada")
        return

    output.write_bytes(content)
    print(f"✓ {len(items)} arquivo(s) salvos em {output}")


def ask_credentials(args, prompt='Senha: '):
    email = args.email
    if not email:
        email = input("E-mail: ").strip()

    password = args.password
    if not password:
        password = getpass.getpass(prompt)
    return email, password


def start_session(client: ApiClient, email: str, password: str) -> WorkspaceState:
    """Login and keep the session the way the web workspace does"""
    state = WorkspaceState()
    data = client.login(email, password)
    state.set_session(data['email'], data['token'])
    return state


def register_command(args):
    email, password = ask_credentials(args)
    try:
        ApiClient(args.server).register(email, password, args.first_name, args.last_name)
    except ApiError as e:
        print(f"✗ {e}")
        sys.exit(1)
    print(f"✓ Conta criada: {email.strip().lower()}")


def login_command(args):
    email, password = ask_credentials(args)
    try:
        state = start_session(ApiClient(args.server), email, password)
    except ApiError as e:
        print(f"✗ {e}")
        sys.exit(1)

    print(f"✓ Sessão iniciada: {state.user}")
    print(f"   Token: {state.token}")


def reset_password_command(args):
    email, password = ask_credentials(args, prompt='Nova senha: ')
    try:
        ApiClient(args.server).reset_password(email, password)
    except ApiError as e:
        print(f"✗ {e}")
        sys.exit(1)
    print("✓ Senha atualizada")


def admin_logins_command(args):
    client = ApiClient(args.server)
    email, password = ask_credentials(args)

    try:
        state = start_session(client, email, password)
    except ApiError as e:
        print(f"✗ {e}")
        sys.exit(1)

    try:
        entries = client.admin_logins()
    except ApiError as e:
        state.clear_session()
        print(f"✗ {e}")
        sys.exit(1)

    print(f"Logins dos últimos 60 dias ({len(entries)}), sessão de {state.user}:")
    for entry in entries:
        name = ' '.join(part for part in (entry.get('first_name'), entry.get('last_name')) if part)
        print(f"   {entry['created_at']}  {entry['email']}  {name}".rstrip())


def build_templates_command(args):
    from template_builder import build_presets

    for path in build_presets(args.dir):
        print(f"✓ {path}")


def main(argv=None):
    """Main CLI entry point"""
    parser = argparse.ArgumentParser(
        description='Plaquinhas - price tag generator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show the items found in a pasted table
  python plaquinhas.py parse tabela.txt

  # Run the web server
  python plaquinhas.py serve --port 4000

  # Export every item as PDF through a running server
  python plaquinhas.py export tabela.txt --model wellington --format pdf -o placas.zip

  # Show the login history (admin account)
  python plaquinhas.py admin-logins --email admin@example.com
        """
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='More output')
    subparsers = parser.add_subparsers(dest='command', required=True)

    parse_parser = subparsers.add_parser('parse', help='Parse a pasted table')
    parse_parser.add_argument('file', help="Text file ('-' for stdin)")
    parse_parser.set_defaults(func=parse_command)

    serve_parser = subparsers.add_parser('serve', help='Run the web server')
    serve_parser.add_argument('--host', default='127.0.0.1')
    serve_parser.add_argument('--port', type=int)
    serve_parser.set_defaults(func=serve_command)

    health_parser = subparsers.add_parser('health', help='Check a running server')
    health_parser.add_argument('--server', default=DEFAULT_SERVER)
    health_parser.set_defaults(func=health_command)

    export_parser = subparsers.add_parser('export', help='Export all items into a ZIP')
    export_parser.add_argument('file', help="Text file ('-' for stdin)")
    export_parser.add_argument('--model', required=True, choices=sorted(TEMPLATE_PRESETS))
    export_parser.add_argument('--format', default='docx', choices=['docx', 'pdf'])
    export_parser.add_argument('-o', '--output', help='ZIP path')
    export_parser.add_argument('--server', default=DEFAULT_SERVER)
    export_parser.set_defaults(func=export_command)

    build_parser = subparsers.add_parser('build-templates', help='Write the preset .docx templates')
    build_parser.add_argument('--dir', help='Output directory (default: modelo_placas)')
    build_parser.set_defaults(func=build_templates_command)

    account_commands = [
        ('register', 'Create an account', register_command),
        ('login', 'Login and print the access token', login_command),
        ('reset-password', 'Set a new password', reset_password_command),
        ('admin-logins', 'List the last 60 days of logins (admin only)', admin_logins_command),
    ]
    for name, help_text, func in account_commands:
        account_parser = subparsers.add_parser(name, help=help_text)
        account_parser.add_argument('--email', help='Account e-mail (prompted when missing)')
        account_parser.add_argument('--password', help='Password (prompted when missing)')
        account_parser.add_argument('--server', default=DEFAULT_SERVER)
        if name == 'register':
            account_parser.add_argument('--first-name')
            account_parser.add_argument('--last-name')
        account_parser.set_defaults(func=func)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    args.func(args)


if __name__ == '__main__':
    main()

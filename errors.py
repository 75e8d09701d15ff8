#!/usr/bin/env python3
"""
Plaquinhas Errors
Exception taxonomy shared by the parsers, generators and account service.

Every error carries the HTTP status the web layer answers with and a short,
user-facing message. Internal details stay in the logs.
"""


class PlaquinhasError(Exception):
    """Base class for every error surfaced to a client"""

    status_code = 500
    default_message = 'Erro no servidor'

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self):
        return {'error': self.message}


class InvalidInput(PlaquinhasError):
    status_code = 400
    default_message = 'Dados inválidos'


class InvalidValue(InvalidInput):
    """A monetary string that does not parse to a finite number"""
    default_message = 'valor inválido'


class Conflict(PlaquinhasError):
    status_code = 409
    default_message = 'E-mail já cadastrado'


class NotFound(PlaquinhasError):
    status_code = 404
    default_message = 'Usuário não encontrado'


class WrongPassword(PlaquinhasError):
    status_code = 401
    default_message = 'Senha incorreta'


class Unauthorized(PlaquinhasError):
    status_code = 401
    default_message = 'Unauthorized'


class Forbidden(PlaquinhasError):
    status_code = 403
    default_message = 'Forbidden'


class TemplateNotFound(PlaquinhasError):
    default_message = 'Template DOCX não encontrado'


class RenderError(PlaquinhasError):
    default_message = 'placeholders ausentes: o template deve conter ITEM e VALOR'


class ConversionServiceError(PlaquinhasError):
    """The external conversion service answered with a non-success status"""

    default_message = 'Falha no serviço de conversão'

    def __init__(self, status: int = None, body: str = ''):
        self.status = status
        self.body = (body or '')[:200]
        super().__init__(f"Gotenberg falhou ({status}): {self.body}")


class PdfConversionUnavailable(PlaquinhasError):
    default_message = 'Falha ao converter para PDF. Configure GOTENBERG_URL ou instale o LibreOffice.'

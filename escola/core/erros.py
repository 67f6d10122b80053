"""
Erros tipados da camada de serviço.

Cada erro carrega um código estável (o mesmo vocabulário das funções
"callable" do Firebase) que as rotas convertem em status HTTP.
"""

STATUS_HTTP = {
    'invalid-argument': 400,
    'unauthenticated': 401,
    'permission-denied': 403,
    'not-found': 404,
    'failed-precondition': 409,
    'internal': 500,
}


class ErroServico(Exception):
    """Falha de pré-condição ou de acesso a dados, com código e mensagem."""

    def __init__(self, codigo: str, mensagem: str):
        if codigo not in STATUS_HTTP:
            raise ValueError(f"Código de erro desconhecido: {codigo}")
        super().__init__(mensagem)
        self.codigo = codigo
        self.mensagem = mensagem

    @property
    def status_http(self) -> int:
        return STATUS_HTTP[self.codigo]

    def para_dict(self) -> dict:
        return {'error': {'status': self.codigo, 'message': self.mensagem}}

"""
Firestore em memória para os testes.

Implementa só o que os serviços usam: coleções/subcoleções, get/set/
create/update (com campos pontilhados, ArrayUnion e ArrayRemove),
add, stream, batch e transação. SERVER_TIMESTAMP vira datetime UTC.
"""

import copy
import threading
import unittest
import uuid
from datetime import datetime, timezone
from unittest.mock import patch

from google.api_core.exceptions import AlreadyExists, NotFound
from google.cloud import firestore

_trava_transacoes = threading.RLock()


def transactional_fake(funcao):
    """Substitui firestore.transactional: a função roda inteira sob uma trava."""
    def executar(transacao, *args, **kwargs):
        with _trava_transacoes:
            return funcao(transacao, *args, **kwargs)
    return executar


def _resolver(valor):
    if valor is firestore.SERVER_TIMESTAMP:
        return datetime.now(timezone.utc)
    if isinstance(valor, dict):
        return {chave: _resolver(v) for chave, v in valor.items()}
    if isinstance(valor, list):
        return [_resolver(v) for v in valor]
    return valor


class SnapshotFake:
    def __init__(self, referencia, dados):
        self.reference = referencia
        self.id = referencia.id
        self._dados = dados

    @property
    def exists(self):
        return self._dados is not None

    def to_dict(self):
        return copy.deepcopy(self._dados)


class ReferenciaFake:
    def __init__(self, banco, path):
        self._banco = banco
        self.path = path
        self.id = path.split('/')[-1]

    def __eq__(self, outro):
        return isinstance(outro, ReferenciaFake) and outro.path == self.path

    def __hash__(self):
        return hash(self.path)

    def __repr__(self):
        return f"ReferenciaFake({self.path!r})"

    def __deepcopy__(self, memo):
        return self

    def collection(self, nome):
        return ColecaoFake(self._banco, f"{self.path}/{nome}")

    def get(self, transaction=None):
        self._banco.leituras.append(self.path)
        return SnapshotFake(self, copy.deepcopy(self._banco.documentos.get(self.path)))

    def set(self, dados, merge=False):
        dados = _resolver(copy.deepcopy(dados))
        atual = self._banco.documentos.get(self.path)
        if merge and atual is not None:
            atual.update(dados)
        else:
            self._banco.documentos[self.path] = dados

    def create(self, dados):
        with self._banco.trava:
            if self.path in self._banco.documentos:
                raise AlreadyExists(f"Document already exists: {self.path}")
            self._banco.documentos[self.path] = _resolver(copy.deepcopy(dados))

    def update(self, campos):
        atual = self._banco.documentos.get(self.path)
        if atual is None:
            raise NotFound(f"No document to update: {self.path}")

        for caminho, valor in campos.items():
            *pais, ultimo = caminho.split('.')
            alvo = atual
            for parte in pais:
                alvo = alvo.setdefault(parte, {})
                if alvo is None:
                    raise ValueError(f"Campo intermediário nulo: {caminho}")

            if isinstance(valor, firestore.ArrayUnion):
                lista = list(alvo.get(ultimo) or [])
                lista.extend(v for v in valor.values if v not in lista)
                alvo[ultimo] = lista
            elif isinstance(valor, firestore.ArrayRemove):
                alvo[ultimo] = [v for v in (alvo.get(ultimo) or []) if v not in valor.values]
            else:
                alvo[ultimo] = _resolver(copy.deepcopy(valor))

    def delete(self):
        self._banco.documentos.pop(self.path, None)


class ColecaoFake:
    def __init__(self, banco, path):
        self._banco = banco
        self.path = path

    def document(self, doc_id=None):
        return ReferenciaFake(self._banco, f"{self.path}/{doc_id or uuid.uuid4().hex[:20]}")

    def add(self, dados):
        referencia = self.document()
        referencia.set(dados)
        return datetime.now(timezone.utc), referencia

    def stream(self):
        prefixo = self.path + '/'
        for path in sorted(self._banco.documentos):
            if path.startswith(prefixo) and '/' not in path[len(prefixo):]:
                referencia = ReferenciaFake(self._banco, path)
                yield SnapshotFake(referencia, copy.deepcopy(self._banco.documentos[path]))


class TransacaoFake:
    def set(self, referencia, dados, merge=False):
        referencia.set(dados, merge=merge)

    def update(self, referencia, campos):
        referencia.update(campos)


class BatchFake:
    def __init__(self):
        self._operacoes = []

    def set(self, referencia, dados, merge=False):
        self._operacoes.append(lambda: referencia.set(dados, merge=merge))

    def update(self, referencia, campos):
        self._operacoes.append(lambda: referencia.update(campos))

    def commit(self):
        for operacao in self._operacoes:
            operacao()
        self._operacoes = []


class FirestoreFake:
    def __init__(self):
        self.documentos = {}
        self.leituras = []
        self.trava = threading.RLock()

    def collection(self, nome):
        return ColecaoFake(self, nome)

    def transaction(self):
        return TransacaoFake()

    def batch(self):
        return BatchFake()

    # Atalhos dos testes
    def dados(self, path):
        return copy.deepcopy(self.documentos.get(path))

    def caminhos(self, prefixo):
        return sorted(p for p in self.documentos if p.startswith(prefixo))


class TesteComFirestore(unittest.TestCase):
    """TestCase com o FirestoreFake no lugar do cliente real."""

    def setUp(self):
        self.db = FirestoreFake()
        for alvo, novo in (
            ('escola.core.database.get_db', lambda: self.db),
            ('google.cloud.firestore.transactional', transactional_fake),
        ):
            patcher = patch(alvo, novo)
            patcher.start()
            self.addCleanup(patcher.stop)

    def ref(self, path):
        return ReferenciaFake(self.db, path)

    def criar(self, path, dados):
        self.ref(path).set(dados)
        return self.ref(path)

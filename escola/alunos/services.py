"""
Camada de Serviço (Service Layer) dos Alunos

Responsável por:
1. Cadastrar alunos e gerar o número de matrícula (contador transacional).
2. Vincular/desvincular cursos (aluno.enrolledCourses <-> curso.registeredStudents).
3. Guardar documentos do aluno no Cloud Storage.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from google.cloud import firestore
from pydantic import ValidationError

from escola.core import database, datas, storage
from escola.core.constants import (
    ASSINATURAS_ARQUIVOS,
    COLECAO_ALUNOS,
    COLECAO_CONTADORES,
    COLECAO_CURSOS,
    DOC_CONTADOR_MATRICULA,
    SLOTS_DOCUMENTOS,
)
from escola.core.erros import ErroServico
from escola.core.logger import get_logger
from escola.core.modelos import CadastroAluno, DocumentoEnviado

logger = get_logger(__name__)


def _mensagem_validacao(erro: ValidationError) -> str:
    partes = []
    for item in erro.errors():
        campo = '.'.join(str(p) for p in item['loc'])
        partes.append(f"{campo}: {item['msg']}")
    return "; ".join(partes)


# === CADASTRO ===

def cadastrar_aluno(dados: dict) -> str:
    """
    Valida o formulário de cadastro e cria o documento do aluno.

    A matrícula fica vazia: quem preenche é o gatilho de criação.
    """
    try:
        cadastro = CadastroAluno.model_validate(dados or {})
    except ValidationError as e:
        raise ErroServico('invalid-argument', f"Dados do aluno inválidos: {_mensagem_validacao(e)}")

    documento = cadastro.para_firestore()

    # Firestore não grava 'date'; o nascimento vai como meia-noite UTC
    nascimento = cadastro.basic_info.date_of_birth
    documento['basicInfo']['dateOfBirth'] = (
        datetime(nascimento.year, nascimento.month, nascimento.day, tzinfo=timezone.utc)
        if nascimento else None
    )
    documento['basicInfo']['dateOfRegistration'] = firestore.SERVER_TIMESTAMP
    documento['matricula'] = None
    documento['enrolledCourses'] = []
    documento['documents'] = {}

    db = database.get_db()
    _, doc_ref = db.collection(COLECAO_ALUNOS).add(documento)
    logger.info(f"Aluno cadastrado: {doc_ref.id} ({cadastro.basic_info.full_name})")
    return doc_ref.id


def listar_alunos(filtro_nome: Optional[str] = None) -> List[dict]:
    db = database.get_db()
    alunos = []
    for doc in db.collection(COLECAO_ALUNOS).stream():
        dados = doc.to_dict() or {}
        nome = (dados.get('basicInfo') or {}).get('fullName', '')
        if filtro_nome and filtro_nome.lower() not in nome.lower():
            continue
        dados['id'] = doc.id
        alunos.append(database.serializar(dados))
    return alunos


def obter_aluno(aluno_id: str) -> dict:
    db = database.get_db()
    doc = db.collection(COLECAO_ALUNOS).document(aluno_id).get()
    if not doc.exists:
        raise ErroServico('not-found', 'Aluno não encontrado.')
    dados = doc.to_dict() or {}
    dados['id'] = doc.id
    return database.serializar(dados)


# === NÚMERO DE MATRÍCULA ===

def formatar_matricula(contador: int, quando: datetime) -> str:
    """
    YY + MM + contador com no mínimo 2 dígitos.
    Ex: (1, ago/2025) -> "250801"; (100, ago/2025) -> "2508100".
    """
    return f"{quando:%y%m}{contador:02d}"


def _incrementar_contador(transacao, contador_ref, aluno_ref=None) -> Optional[int]:
    # Entrega repetida do evento: o aluno já numerado não consome o contador
    if aluno_ref is not None:
        aluno = aluno_ref.get(transaction=transacao)
        if aluno.exists and (aluno.to_dict() or {}).get('matricula'):
            return None

    snapshot = contador_ref.get(transaction=transacao)
    atual = 0
    if snapshot.exists:
        atual = (snapshot.to_dict() or {}).get('count', 0)

    atual += 1
    transacao.set(contador_ref, {'count': atual})
    return atual


def alocar_numero_matricula(quando: Optional[datetime] = None, aluno_id: Optional[str] = None) -> Optional[str]:
    """
    Incrementa o contador global dentro de uma transação e devolve a matrícula.
    O contador nunca é zerado; o mês/ano vêm do relógio no momento da alocação.

    Com 'aluno_id', o aluno é lido na mesma transação: se ele já tiver
    matrícula, nada é alocado e o retorno é None.
    """
    db = database.get_db()
    contador_ref = db.collection(COLECAO_CONTADORES).document(DOC_CONTADOR_MATRICULA)
    aluno_ref = db.collection(COLECAO_ALUNOS).document(aluno_id) if aluno_id else None

    contador = firestore.transactional(_incrementar_contador)(db.transaction(), contador_ref, aluno_ref)
    if contador is None:
        return None
    return formatar_matricula(contador, quando or datas.agora())


def gerar_matricula(aluno_id: str, dados: Optional[dict]) -> Optional[str]:
    """
    Corpo do gatilho "aluno criado". Nunca levanta exceção.

    Se o aluno já tiver matrícula (no evento ou no documento atual, lido
    dentro da transação do contador), não faz nada: a reentrega do evento
    traz a mesma foto com 'matricula' vazia.
    Se a gravação no aluno falhar, o contador fica incrementado e o aluno
    fica sem matrícula até a correção manual (corrigir_matriculas).
    """
    if (dados or {}).get('matricula'):
        logger.info(f"Matrícula já existe para o aluno {aluno_id}, pulando a geração.")
        return None

    try:
        matricula = alocar_numero_matricula(aluno_id=aluno_id)
    except Exception as e:
        logger.error(f"Erro na transação para gerar a matrícula do aluno {aluno_id}: {e}", exc_info=True)
        return None

    if matricula is None:
        logger.info(f"Aluno {aluno_id} já recebeu matrícula (evento repetido), pulando a geração.")
        return None

    logger.info(f"Gerando matrícula {matricula} para o aluno {aluno_id}")

    try:
        db = database.get_db()
        db.collection(COLECAO_ALUNOS).document(aluno_id).update({'matricula': matricula})
    except Exception as e:
        logger.error(
            f"Contador incrementado, mas a matrícula {matricula} não foi gravada no aluno {aluno_id}: {e}",
            exc_info=True
        )
        return None

    return matricula


def corrigir_matriculas() -> Dict[str, Optional[str]]:
    """Gera matrícula para todos os alunos que ainda estão sem uma."""
    db = database.get_db()
    resultado = {}
    for doc in db.collection(COLECAO_ALUNOS).stream():
        dados = doc.to_dict() or {}
        if dados.get('matricula'):
            continue
        resultado[doc.id] = gerar_matricula(doc.id, dados)
    logger.info(f"Correção de matrículas concluída: {len(resultado)} aluno(s) processado(s).")
    return resultado


# === CURSOS DO ALUNO ===

def adicionar_curso(aluno_id: str, curso_id: str) -> None:
    """
    Matricula o aluno no curso. A mensalidade e a taxa de matrícula
    são geradas depois, pelo gatilho de escrita do aluno.
    """
    db = database.get_db()
    aluno_ref = db.collection(COLECAO_ALUNOS).document(aluno_id)
    curso_ref = db.collection(COLECAO_CURSOS).document(curso_id)

    if not aluno_ref.get().exists:
        raise ErroServico('not-found', 'Aluno não encontrado.')
    if not curso_ref.get().exists:
        raise ErroServico('not-found', 'Curso não encontrado.')

    batch = db.batch()
    batch.update(aluno_ref, {'enrolledCourses': firestore.ArrayUnion([curso_ref])})
    batch.update(curso_ref, {'registeredStudents': firestore.ArrayUnion([aluno_ref])})
    batch.commit()
    logger.info(f"Curso {curso_id} adicionado ao aluno {aluno_id}")


def remover_curso(aluno_id: str, curso_id: str) -> None:
    db = database.get_db()
    aluno_ref = db.collection(COLECAO_ALUNOS).document(aluno_id)
    curso_ref = db.collection(COLECAO_CURSOS).document(curso_id)

    if not aluno_ref.get().exists:
        raise ErroServico('not-found', 'Aluno não encontrado.')

    batch = db.batch()
    batch.update(aluno_ref, {'enrolledCourses': firestore.ArrayRemove([curso_ref])})
    # O curso pode ter sido apagado; nesse caso só o aluno é atualizado
    if curso_ref.get().exists:
        batch.update(curso_ref, {'registeredStudents': firestore.ArrayRemove([aluno_ref])})
    batch.commit()
    logger.info(f"Curso {curso_id} removido do aluno {aluno_id}")


# === DOCUMENTOS ===

def detectar_tipo_arquivo(cabecalho: bytes) -> Optional[str]:
    """Content-type pelo "magic number", ou None se não for um tipo aceito."""
    for tipo, assinatura in ASSINATURAS_ARQUIVOS.items():
        if cabecalho.startswith(assinatura):
            return tipo
    return None


def salvar_documento(aluno_id: str, slot: str, arquivo: Any, nome_arquivo: str) -> dict:
    """
    Envia o arquivo ao bucket e grava os metadados em documents.<slot>.
    Um arquivo anterior no mesmo slot é apagado do bucket.
    """
    if slot not in SLOTS_DOCUMENTOS:
        raise ErroServico('invalid-argument', f"Slot de documento desconhecido: {slot}")

    db = database.get_db()
    aluno_ref = db.collection(COLECAO_ALUNOS).document(aluno_id)
    snapshot = aluno_ref.get()
    if not snapshot.exists:
        raise ErroServico('not-found', 'Aluno não encontrado.')

    cabecalho = arquivo.read(8)
    arquivo.seek(0)  # Resetar o ponteiro antes do upload
    tipo = detectar_tipo_arquivo(cabecalho)
    if tipo is None:
        logger.warning(f"Upload rejeitado (Magic Number inválido): {nome_arquivo} do aluno {aluno_id}")
        raise ErroServico('invalid-argument', 'Apenas arquivos PDF, PNG ou JPEG são permitidos.')

    nome_blob = storage.upload_file(arquivo, f"alunos/{aluno_id}", nome_arquivo, tipo)

    metadados = DocumentoEnviado(
        file_name=nome_arquivo,
        blob_name=nome_blob,
        content_type=tipo,
    ).para_firestore()
    metadados['uploadedAt'] = firestore.SERVER_TIMESTAMP

    anterior = ((snapshot.to_dict() or {}).get('documents') or {}).get(slot)
    aluno_ref.update({f'documents.{slot}': metadados})

    if anterior and anterior.get('blobName'):
        storage.delete_file(anterior['blobName'])

    logger.info(f"Documento '{slot}' salvo para o aluno {aluno_id}: {nome_blob}")
    return database.serializar(metadados)


def url_documento(aluno_id: str, slot: str) -> str:
    db = database.get_db()
    snapshot = db.collection(COLECAO_ALUNOS).document(aluno_id).get()
    if not snapshot.exists:
        raise ErroServico('not-found', 'Aluno não encontrado.')

    metadados = ((snapshot.to_dict() or {}).get('documents') or {}).get(slot)
    if not metadados or not metadados.get('blobName'):
        raise ErroServico('not-found', f"O aluno não possui o documento '{slot}'.")

    url = storage.generate_signed_url(metadados['blobName'])
    if not url:
        raise ErroServico('internal', 'Não foi possível gerar o link do documento.')
    return url

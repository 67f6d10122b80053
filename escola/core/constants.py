"""
Constantes Globais do Sistema.
Fonte Única da Verdade (Single Source of Truth) para coleções e regras escolares.
"""

from zoneinfo import ZoneInfo

# Fuso fixo usado em matrículas, vencimentos, chamadas e no agendamento mensal
FUSO_HORARIO = ZoneInfo('America/Sao_Paulo')

# Agendamento do Cloud Scheduler para POST /gatilhos/mensalidades
CRON_MENSALIDADES = '0 0 1 * *'

# === COLEÇÕES DO FIRESTORE ===
COLECAO_ALUNOS = 'students'
COLECAO_MENSALIDADES = 'monthlyPayments'
COLECAO_CURSOS = 'courses'
COLECAO_EVENTOS_UNICOS = 'uniqueEvents'
COLECAO_SALAS = 'rooms'
COLECAO_PROFESSORES = 'professors'
COLECAO_CONTADORES = 'counters'
COLECAO_CHAMADAS = 'callRecords'
COLECAO_USUARIOS = 'usuarios'

DOC_CONTADOR_MATRICULA = 'matriculaCounter'

# === FINANCEIRO ===
# Período sentinela da taxa de matrícula (não é um mês do calendário)
PERIODO_TAXA_MATRICULA = 'taxa_de_matricula'
VALOR_TAXA_MATRICULA = 50.00
DIA_VENCIMENTO = 5

STATUS_PENDENTE = 'pending'
STATUS_PAGO = 'paid'

# === DOCUMENTOS DO ALUNO ===
SLOTS_DOCUMENTOS_BASE = ('identificationDocument', 'proofOfAddress', 'photo')
SLOTS_DOCUMENTOS_MENOR = ('guardianIdentification', 'guardianConsent')
SLOT_ATESTADO_MEDICO = 'medicalRelease'
MAIORIDADE = 18

SLOTS_DOCUMENTOS = SLOTS_DOCUMENTOS_BASE + SLOTS_DOCUMENTOS_MENOR + (SLOT_ATESTADO_MEDICO,)

# Atividades físicas que exigem atestado médico (comparação sem acento/caixa)
ATIVIDADES_COM_ATESTADO = (
    'natacao',
    'hidroginastica',
    'judo',
    'jiu-jitsu',
    'muay thai',
    'capoeira',
    'ballet',
    'danca',
    'ginastica',
)

# Tipos aceitos no upload, validados pelo "magic number" do arquivo
ASSINATURAS_ARQUIVOS = {
    'application/pdf': b'%PDF',
    'image/png': b'\x89PNG',
    'image/jpeg': b'\xff\xd8\xff',
}

# === CHAMADA ===
STATUS_CHAMADA_ATIVA = 'active'
STATUS_CHAMADA_ENCERRADA = 'closed'

# === AGENDA ===
DIAS_SEMANA = {
    'DOMINGO': 0,
    'SEGUNDA': 1,
    'TERÇA': 2,
    'QUARTA': 3,
    'QUINTA': 4,
    'SEXTA': 5,
    'SÁBADO': 6,
}

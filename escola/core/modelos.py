"""
Modelos dos Documentos (Schema-in-code)

O Firestore não tem DDL. Os modelos Pydantic abaixo descrevem o formato
de cada documento; os aliases em camelCase são exatamente os nomes de
campo gravados no banco (os mesmos lidos pelo front-end React).
"""

from datetime import date, datetime
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ModeloDocumento(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )

    def para_firestore(self) -> dict:
        return self.model_dump(by_alias=True)


# === ALUNO ===

class DocumentoIdentificacao(ModeloDocumento):
    type: Literal['CPF', 'RG', 'Outro'] = 'CPF'
    number: str = ''


class InfoBasica(ModeloDocumento):
    full_name: str = Field(..., min_length=3, max_length=120)
    identification_document: DocumentoIdentificacao = Field(default_factory=DocumentoIdentificacao)
    date_of_birth: Optional[date] = None
    gender: str = ''
    education_level: str = ''
    status: str = 'ATIVO'

    @field_validator('full_name')
    @classmethod
    def limpar_nome(cls, valor: str) -> str:
        return " ".join(valor.split())

    @field_validator('date_of_birth', mode='before')
    @classmethod
    def data_vazia(cls, valor):
        return None if valor == '' else valor


class Endereco(ModeloDocumento):
    street: str = ''
    neighborhood: str = ''
    zipcode: str = ''
    city: str = ''


class InfoContato(ModeloDocumento):
    phone: str = ''
    emergency_contact: str = ''
    email: str = ''
    address: Endereco = Field(default_factory=Endereco)


class Responsavel(ModeloDocumento):
    name: str
    phone: str = ''
    cpf: str = ''
    relationship: str = ''


class InfoSaude(ModeloDocumento):
    chronic_diseases: str = ''
    regular_medications: str = ''
    dietary_restrictions: str = ''
    allergies: str = ''
    blood_type: str = ''
    health_plan_details: str = ''


class CadastroAluno(ModeloDocumento):
    """Payload do formulário de cadastro de aluno."""
    basic_info: InfoBasica
    contact_info: InfoContato = Field(default_factory=InfoContato)
    responsible_info: List[Responsavel] = Field(default_factory=list)
    health_info: InfoSaude = Field(default_factory=InfoSaude)


class DocumentoEnviado(ModeloDocumento):
    """Metadados de um arquivo guardado em um slot de 'documents'."""
    file_name: str
    blob_name: str
    content_type: str
    uploaded_at: Any = None


# === CURSO / EVENTO ===

class HorarioAula(ModeloDocumento):
    day: str
    start_time: str
    end_time: str


class Curso(ModeloDocumento):
    name: str = ''
    title: Optional[str] = None
    price: float = 0.0
    room_ref: Any = None
    professor_ref: Any = None
    schedule: List[HorarioAula] = Field(default_factory=list)
    registered_students: List[Any] = Field(default_factory=list)


# === FINANCEIRO ===

class Mensalidade(ModeloDocumento):
    month: str
    amount: float
    status: Literal['pending', 'paid'] = 'pending'
    due_date: datetime
    payment_date: Optional[datetime] = None
    course_id: str
    course_name: Optional[str] = None


# === CHAMADA ===

class ItemPresenca(ModeloDocumento):
    student_ref: Any
    present: bool = False
    check_in_time: Optional[datetime] = None


class RegistroChamada(ModeloDocumento):
    event_ref: Any
    name: Optional[str] = None
    attendance_list: List[ItemPresenca] = Field(default_factory=list)
    status: str = 'active'

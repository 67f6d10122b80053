from flask_wtf import FlaskForm
from wtforms import StringField
from wtforms.validators import DataRequired, Length, Regexp

class CursoAlunoForm(FlaskForm):
    class Meta:
        csrf = False # API JSON: a proteção vem da sessão do admin

    curso_id = StringField('Curso', validators=[
        DataRequired(message="O curso é obrigatório"),
        Length(max=128, message="ID de curso muito longo"),
        Regexp(r'^[^/]+$', message="ID de curso inválido")
    ])

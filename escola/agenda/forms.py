from flask_wtf import FlaskForm
from wtforms import DateField, StringField
from wtforms.validators import DataRequired, Length, Regexp

HORARIO = Regexp(r'^([01]\d|2[0-3]):[0-5]\d$', message="Horário deve estar no formato HH:MM")

class EventoForm(FlaskForm):
    class Meta:
        csrf = False # API JSON: a proteção vem da sessão do admin

    name = StringField('Nome', validators=[
        DataRequired(message="Por favor, preencha todos os campos."),
        Length(min=3, max=100)
    ])
    room = StringField('Sala', validators=[DataRequired(message="Por favor, preencha todos os campos.")])
    responsible = StringField('Responsável', validators=[DataRequired(message="Por favor, preencha todos os campos.")])
    date = DateField('Data', format='%Y-%m-%d', validators=[DataRequired(message="A data fornecida é inválida.")])
    start_time = StringField('Início', validators=[DataRequired(), HORARIO])
    end_time = StringField('Fim', validators=[DataRequired(), HORARIO])

from flask_wtf import FlaskForm
from wtforms import BooleanField, StringField
from wtforms.validators import DataRequired, Length

class PresencaForm(FlaskForm):
    class Meta:
        csrf = False # API JSON: a proteção vem da sessão do operador

    aluno_id = StringField('Aluno', validators=[
        DataRequired(message="O aluno é obrigatório"),
        Length(max=128)
    ])

    # JSON envia booleanos de verdade; 'false' (texto) também desmarca
    presente = BooleanField('Presente', false_values=(False, 'false', '0', ''))

from flask_wtf import FlaskForm
from wtforms import DateField
from wtforms.validators import Optional

class PagamentoForm(FlaskForm):
    class Meta:
        csrf = False # API JSON: a proteção vem da sessão do admin

    # Sem data, vale o momento do registro
    data_pagamento = DateField('Data do pagamento', format='%Y-%m-%d', validators=[Optional()])

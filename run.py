"""
Ponto de Entrada da Aplicação (Runner)

Este script importa a "Application Factory" (create_app) do pacote 'escola'
e inicia o servidor de desenvolvimento do Flask.

Para executar o servidor:
(Com o ambiente virtual .venv ativo)
$ python run.py
"""

import os

from escola import create_app

app = create_app()

if __name__ == "__main__":
    app.run(host='0.0.0.0', port=int(os.environ.get('PORT', 5000)), debug=app.config['DEBUG'])

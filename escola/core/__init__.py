"""
Infraestrutura compartilhada: banco, logs, erros, datas, modelos e storage.
"""

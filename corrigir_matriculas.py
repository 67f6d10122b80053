"""
Script Utilitário: corrigir_matriculas.py

O gatilho de matrícula não tenta de novo quando falha. Este script gera
a matrícula de todos os alunos que ficaram sem uma.
"""

from escola import create_app
from escola.alunos.services import corrigir_matriculas

app = create_app()

if __name__ == "__main__":
    with app.app_context():
        resultado = corrigir_matriculas()

    if not resultado:
        print("✅ Nenhum aluno sem matrícula.")
    for aluno_id, matricula in resultado.items():
        if matricula:
            print(f"✅ {aluno_id}: {matricula}")
        else:
            print(f"❌ {aluno_id}: falhou (veja o log)")

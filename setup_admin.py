"""
Script Utilitário: setup_admin.py
Use este script para promover um operador a Administrador manualmente.
"""

from escola import create_app
from escola.auth.services import promover_admin

# Inicializa a aplicação para carregar configurações
app = create_app()

def promover_usuario(email):
    print(f"--- Promovendo usuário: {email} ---")

    with app.app_context():
        if not promover_admin(email):
            print(f"❌ ERRO: O usuário '{email}' não foi encontrado no banco de dados.")
            print("DICA: Faça login na aplicação pelo navegador pelo menos uma vez para criar o registro inicial.")
            return

        print(f"✅ SUCESSO! O usuário '{email}' agora é um ADMIN.")
        print("⚠️  IMPORTANTE: Faça LOGOUT e LOGIN novamente para a mudança surtir efeito.")

if __name__ == "__main__":
    email_alvo = input("Digite o e-mail do usuário que será Admin: ").strip()
    promover_usuario(email_alvo)

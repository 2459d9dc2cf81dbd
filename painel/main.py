from painel.core.application import create_application

# Instância global para uvicorn: `uvicorn painel.main:app --reload`
app = create_application()

import os
from dotenv import load_dotenv

# Load environment variables from .env file before the config classes read them
load_dotenv()

from claimdesk import create_app  # noqa: E402

# Determine configuration based on environment
config_name = os.environ.get('FLASK_ENV', 'development')

# Create application instance
app = create_app(config_name)

if __name__ == '__main__':
    host = os.environ.get('FLASK_HOST', '0.0.0.0')
    port = int(os.environ.get('PORT', os.environ.get('FLASK_PORT', 5000)))
    debug_mode = config_name == 'development'

    app.run(
        host=host,
        port=port,
        debug=debug_mode
    )

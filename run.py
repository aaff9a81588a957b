import os

from rollodex import create_app

app = create_app()

if __name__ == '__main__':
    port = int(os.environ.get('PORT', 3001))
    app.run(host='0.0.0.0', port=port, debug=app.config.get('DEBUG', False))

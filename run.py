"""
Dynamic Pricing AI backend entry point.
"""
import os

from dynamic_pricing import create_app

config_name = os.getenv('FLASK_ENV', 'production')
app = create_app(config_name)

if __name__ == '__main__':
    app.run(
        host='0.0.0.0',
        port=int(os.getenv('PORT', 4000)),
        debug=os.getenv('FLASK_ENV') == 'development'
    )

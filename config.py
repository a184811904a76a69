import os
from dotenv import load_dotenv

load_dotenv()

basedir = os.path.abspath(os.path.dirname(__file__))


def _allowances_from_env(value):
    """Parses 'Name:centavos,Name:centavos' into a list of (name, amount) pairs."""
    if not value:
        return [('Rice Subsidy', 100000)]
    allowances = []
    for item in value.split(','):
        name, _, amount = item.partition(':')
        if name.strip():
            allowances.append((name.strip(), int(amount)))
    return allowances


class Config:
    """Base configuration class."""
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    # Relative SQLite paths resolve against the Flask instance folder
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///hr_portal.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    MIGRATION_DIR = os.path.join(basedir, 'migrations')

    # JSON API; request bodies are validated by WTForms without a CSRF token
    WTF_CSRF_ENABLED = False

    # Pay policy
    PAYROLL_TIMEZONE = os.environ.get('PAYROLL_TIMEZONE') or 'Asia/Manila'
    PAYROLL_STANDARD_SHIFT_MINUTES = int(os.environ.get('PAYROLL_STANDARD_SHIFT_MINUTES') or 480)
    PAYROLL_OVERTIME_MULTIPLIER = os.environ.get('PAYROLL_OVERTIME_MULTIPLIER') or '1.25'
    PAYROLL_NIGHT_DIFF_MULTIPLIER = os.environ.get('PAYROLL_NIGHT_DIFF_MULTIPLIER') or '1.1'
    PAYROLL_REGULAR_HOLIDAY_MULTIPLIER = os.environ.get('PAYROLL_REGULAR_HOLIDAY_MULTIPLIER') or '2.0'
    PAYROLL_REGULAR_HOLIDAY_OT_MULTIPLIER = os.environ.get('PAYROLL_REGULAR_HOLIDAY_OT_MULTIPLIER') or '2.5'
    PAYROLL_SPECIAL_HOLIDAY_MULTIPLIER = os.environ.get('PAYROLL_SPECIAL_HOLIDAY_MULTIPLIER') or '1.3'
    PAYROLL_SPECIAL_HOLIDAY_OT_MULTIPLIER = os.environ.get('PAYROLL_SPECIAL_HOLIDAY_OT_MULTIPLIER') or '1.63'
    PAYROLL_ALLOWANCES = _allowances_from_env(os.environ.get('PAYROLL_ALLOWANCES'))
    PAYROLL_WITHHOLDING_TAX = os.environ.get('PAYROLL_WITHHOLDING_TAX', '').lower() in ('1', 'true', 'yes')

    # Logging
    LOG_TO_STDOUT = os.environ.get('LOG_TO_STDOUT')

    @staticmethod
    def init_app(app):
        """Initialize application-specific configuration."""
        import logging
        from logging import StreamHandler

        if app.debug or app.testing:
            return

        formatter = logging.Formatter(
            '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
        )
        if app.config.get('LOG_TO_STDOUT'):
            stream_handler = StreamHandler()
            stream_handler.setFormatter(formatter)
            stream_handler.setLevel(logging.INFO)
            app.logger.addHandler(stream_handler)
        else:
            if not os.path.exists('logs'):
                os.mkdir('logs')
            file_handler = logging.FileHandler('logs/payroll.log')
            file_handler.setFormatter(formatter)
            file_handler.setLevel(logging.INFO)
            app.logger.addHandler(file_handler)
        app.logger.setLevel(logging.INFO)
        app.logger.info('HR Portal startup')


class DevelopmentConfig(Config):
    DEBUG = True


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    PAYROLL_ALLOWANCES = [('Rice Subsidy', 100000)]
    PAYROLL_WITHHOLDING_TAX = False


class ProductionConfig(Config):
    DEBUG = False

    @staticmethod
    def init_app(app):
        """Initialize production configuration with validation."""
        Config.init_app(app)

        if not os.environ.get('SECRET_KEY'):
            raise ValueError("SECRET_KEY environment variable must be set in production!")

        if not os.environ.get('DATABASE_URL'):
            raise ValueError("DATABASE_URL environment variable must be set in production!")

        app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY')
        app.config['SQLALCHEMY_DATABASE_URI'] = os.environ.get('DATABASE_URL')


config = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
    'default': DevelopmentConfig
}

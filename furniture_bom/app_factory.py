'''组装 Flask App 的工厂（不启动，不产生行为副作用）
负责注入配置，注册蓝图，初始化 server-side session（购物篮存放在 session 中），注册 error handler；
不负责启动服务（不调用 app.run()），会被 run.py / 单元测试调用'''
# furniture_bom/app_factory.py
from flask import Flask, jsonify
from flask_session import Session
import os
from dotenv import load_dotenv

# 加载环境变量
load_dotenv()

# 获取项目根目录（使用绝对路径）
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def create_app(test_config=None):
    """应用工厂函数"""
    app = Flask(__name__)

    # 基础配置
    secret_key = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    if isinstance(secret_key, bytes):
        secret_key = secret_key.decode('utf-8')
    app.config['SECRET_KEY'] = secret_key

    # 数据库配置（使用绝对路径）
    db_path = os.path.join(BASE_DIR, 'furniture_bom.db')
    default_db_url = f"sqlite:///{db_path}"
    app.config['SQLALCHEMY_DATABASE_URI'] = os.getenv('DATABASE_URL', default_db_url)

    # 全局外观默认值（model / finish）
    app.config['BOM_DEFAULT_MODEL'] = os.getenv('BOM_DEFAULT_MODEL') or None
    app.config['BOM_DEFAULT_FINISH'] = os.getenv('BOM_DEFAULT_FINISH') or None

    # Session 配置
    app.config['SESSION_TYPE'] = 'filesystem'
    app.config['SESSION_PERMANENT'] = False
    app.config['SESSION_USE_SIGNER'] = True
    app.config['SESSION_KEY_PREFIX'] = 'furniture_bom:'
    app.config['SESSION_FILE_DIR'] = os.getenv(
        'SESSION_FILE_DIR', os.path.join(BASE_DIR, 'flask_session')
    )

    if test_config:
        app.config.update(test_config)

    os.makedirs(app.config['SESSION_FILE_DIR'], exist_ok=True)

    # 初始化 Session
    Session(app)

    # 注册蓝图
    from furniture_bom.routes.catalog import catalog_bp
    from furniture_bom.routes.basket import basket_bp
    from furniture_bom.routes.bom import bom_bp

    app.register_blueprint(catalog_bp)
    app.register_blueprint(basket_bp)
    app.register_blueprint(bom_bp)

    # 注册错误处理
    register_error_handlers(app)

    return app


def register_error_handlers(app):
    """注册错误处理器"""
    @app.errorhandler(404)
    def not_found(error):
        return jsonify(error="Not found"), 404

    @app.errorhandler(500)
    def internal_error(error):
        return jsonify(error="Internal server error"), 500

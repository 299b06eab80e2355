"""适配器层 - 端口的具体实现"""

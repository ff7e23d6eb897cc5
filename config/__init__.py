# -*- coding: utf-8 -*-
"""
配置模块
"""

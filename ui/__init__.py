# -*- coding: utf-8 -*-
"""
界面模块
"""

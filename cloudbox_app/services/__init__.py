# cloudbox_app/services/__init__.py
# -*- coding: utf-8 -*-

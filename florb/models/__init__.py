"""Florb Models Package"""

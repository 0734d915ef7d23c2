from .faq import Faq

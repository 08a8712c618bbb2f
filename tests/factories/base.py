"""
Factory de base: persistance optionnelle via db_session.
"""
import factory


class SessionFactory(factory.Factory):
    """
    Sans db_session l'objet reste transitoire (tests purs);
    avec db_session il est ajoute et flushe (id attribue).
    """

    class Meta:
        abstract = True

    @classmethod
    def _create(cls, model_class, *args, **kwargs):
        db_session = kwargs.pop("db_session", None)
        obj = super()._create(model_class, *args, **kwargs)
        if db_session:
            db_session.add(obj)
            db_session.flush()
        return obj
